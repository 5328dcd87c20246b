"""Patient roster entries used for matching a detected patient name."""

from typing import Optional

from rehab_import.models.extraction import SnapshotModel


class PatientOption(SnapshotModel):
    """A patient the practitioner can attach the import to."""

    id: str
    fullname: str
    email: Optional[str] = None
    image: Optional[str] = None
