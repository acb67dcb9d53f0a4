from __future__ import annotations

from typing import Optional


def format_address_with_info(
    address: Optional[str] = None,
    date_of_birth: Optional[str] = None,
    gender: Optional[str] = None,
) -> str:
    """Fold date of birth and gender into the address line stored for a student.

    ``"12 Elm St", "2000-01-01"`` becomes ``"12 Elm St | DOB: 2000-01-01"``.
    Missing (or empty) values are skipped; the function never raises.
    """

    if not date_of_birth and not gender:
        return address or ""

    additional_info = []
    if date_of_birth:
        additional_info.append(f"DOB: {date_of_birth}")
    if gender:
        additional_info.append(f"Gender: {gender}")

    info = ", ".join(additional_info)
    return f"{address} | {info}" if address else info
