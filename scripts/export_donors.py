#!/usr/bin/env python3
"""
Write the donor export (XLSX or CSV) to disk without going through the API.

Usage: python scripts/export_donors.py
       python scripts/export_donors.py --format csv --blood-group O- --availability available
       python scripts/export_donors.py --output exports/
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from donor_registry.api.dependencies import get_policy
from donor_registry.core.config import settings
from donor_registry.database.database import SessionLocal
from donor_registry.repositories import SqlAlchemyDonorRepository
from donor_registry.services.eligibility import parse_availability_filter
from donor_registry.services.reporting import build_export


def export_donors(fmt="xlsx", blood_group=None, availability=None, output_dir="."):
    policy = get_policy()
    if blood_group and not policy.validate_blood_group(blood_group):
        raise ValueError(f"Invalid blood group: {blood_group}")
    available = parse_availability_filter(availability)

    db = SessionLocal()
    try:
        records = SqlAlchemyDonorRepository(db).list(blood_group=blood_group, available=available)
    finally:
        db.close()

    export = build_export(records, policy, fmt=fmt, app_name=settings.APP_NAME)
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, export.filename)
    with open(path, "wb") as f:
        f.write(export.content)

    print(f"✅ Exported {len(records)} donor(s) to {path}")
    return path


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Export donor records to XLSX or CSV")
    parser.add_argument("--format", choices=["xlsx", "csv"], default="xlsx", help="Output format")
    parser.add_argument("--blood-group", default=None, help="Only export this blood group (e.g. AB+)")
    parser.add_argument("--availability", default=None, help="available/unavailable, true/false or 1/0")
    parser.add_argument("--output", default=".", help="Directory to write the file into")
    args = parser.parse_args()

    try:
        export_donors(
            fmt=args.format,
            blood_group=args.blood_group,
            availability=args.availability,
            output_dir=args.output,
        )
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)
