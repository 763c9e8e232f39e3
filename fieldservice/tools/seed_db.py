"""Seed users and engineers from CSV files.

Usage:
    python -m fieldservice.tools.seed_db
    python -m fieldservice.tools.seed_db --data-dir data
    python -m fieldservice.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.adapters.csv_loader.loader import load_engineers, load_users
from fieldservice.adapters.geocoder.factory import build_geocoder
from fieldservice.adapters.persistence.database import async_session_factory
from fieldservice.adapters.persistence.models import (
    EngineerModel,
    HazardModel,
    TicketModel,
    UserModel,
)
from fieldservice.adapters.persistence.repositories import (
    SqlEngineerRepository,
    SqlUserRepository,
)
from fieldservice.application.ports.geocoder_port import GeocoderPort
from fieldservice.config import settings
from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.user import User
from fieldservice.domain.errors import CollaboratorError
from fieldservice.domain.value_objects.enums import Specialization
from fieldservice.domain.value_objects.geo_point import GeoPoint

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    for model in [TicketModel, HazardModel, EngineerModel, UserModel]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def _locate(geocoder: GeocoderPort, ed: dict) -> GeoPoint | None:
    """Use CSV coordinates when present, else geocode the engineer's pincode."""
    point = GeoPoint.parse(ed["latitude"], ed["longitude"])
    if point is not None or not ed["pincode"]:
        return point
    try:
        resolved = await geocoder.resolve(ed["pincode"])
    except CollaboratorError as e:
        logger.warning("Engineer '%s': geocoding %s failed: %s", ed["email"], ed["pincode"], e)
        return None
    if resolved is None:
        logger.warning(
            "Engineer '%s' has no coordinates — it will be excluded from distance ranking!",
            ed["email"],
        )
        return None
    return resolved.location


async def seed(data_dir: Path, drop: bool = False, geocoder: GeocoderPort | None = None) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"users": 0, "engineers": 0}

    user_csv = _find_csv(data_dir, ["users", "customers"])
    engineer_csv = _find_csv(data_dir, ["engineers", "technicians"])
    if not engineer_csv:
        raise FileNotFoundError(
            f"No engineers CSV found in {data_dir}. Expected something like engineers.csv"
        )

    geocoder = geocoder or build_geocoder(settings)

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        users = SqlUserRepository(session)
        engineers = SqlEngineerRepository(session)

        if user_csv:
            for ud in load_users(user_csv):
                if await users.get_by_email(ud["email"]):
                    logger.debug("User '%s' already exists, skipping", ud["email"])
                    continue
                await users.save(User(**ud))
                counts["users"] += 1
            await session.commit()
        else:
            logger.info("No users CSV found — skipping user import")

        for ed in load_engineers(engineer_csv):
            if await engineers.get_by_email(ed["email"]):
                logger.debug("Engineer '%s' already exists, skipping", ed["email"])
                continue
            try:
                specialization = Specialization(ed["specialization"])
            except ValueError:
                logger.warning("Engineer '%s': unknown specialization '%s', skipping", ed["email"], ed["specialization"])
                continue

            await engineers.save(
                Engineer(
                    email=ed["email"],
                    name=ed["name"],
                    phone=ed["phone"],
                    specialization=specialization,
                    availability=ed["availability"],
                    location=await _locate(geocoder, ed),
                    address=ed["address"],
                    pincode=ed["pincode"],
                    is_engineer=ed["is_engineer"],
                )
            )
            counts["engineers"] += 1

        await session.commit()

    logger.info("Seed complete: %d users, %d engineers", counts["users"], counts["engineers"])
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        users = await session.scalar(select(func.count()).select_from(UserModel))
        engineers = (await session.execute(select(EngineerModel))).scalars().all()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Users:     {users}")
        print(f"Engineers: {len(engineers)}")
        with_coords = sum(1 for e in engineers if e.latitude is not None and e.longitude is not None)
        print(f"Engineers with coordinates: {with_coords}/{len(engineers)}")
        approved = sum(1 for e in engineers if e.is_engineer)
        print(f"Approved engineers: {approved}/{len(engineers)}")
        by_spec: dict[str, int] = {}
        for e in engineers:
            by_spec[e.specialization] = by_spec.get(e.specialization, 0) + 1
        print(f"Specialization distribution: {by_spec}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the field-service database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default=settings.csv_data_path,
        help=f"Directory containing CSV files (default: {settings.csv_data_path})",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
