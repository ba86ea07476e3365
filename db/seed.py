# Insert starter clock-in perimeters for a fresh database
import logging
from typing import Iterable, List

from sqlmodel import Session, select

from models.perimeter import Perimeter, PerimeterCreate

logger = logging.getLogger(__name__)

SAMPLE_PERIMETERS = [
    PerimeterCreate(name="Office", center_lat=51.5074, center_lng=-0.1278, radius_km=0.5),
]


def seed_perimeters(session: Session, perimeters: Iterable[PerimeterCreate] = SAMPLE_PERIMETERS) -> List[Perimeter]:
    """Add each perimeter unless one with the same name already exists."""
    existing = {p.name for p in session.exec(select(Perimeter)).all()}

    added = []
    for data in perimeters:
        if data.name in existing:
            logger.info(f"Perimeter {data.name!r} already exists")
            continue
        perimeter = Perimeter(**data.model_dump())
        session.add(perimeter)
        added.append(perimeter)
        existing.add(data.name)
        logger.info(f"Added perimeter {data.name!r}")

    session.commit()
    for perimeter in added:
        session.refresh(perimeter)
    return added


if __name__ == "__main__":
    from sqlmodel import SQLModel

    import models  # noqa: F401
    from db.session import engine

    logging.basicConfig(level=logging.INFO)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_perimeters(session)
