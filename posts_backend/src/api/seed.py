"""
Sample data for local development.

Usage:
    python -m src.api.seed --count 10

Posts are written to whichever backend PERSISTENCE_BACKEND selects, so this
is mostly useful with the sqlite backend.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional

import typer

from .logging_config import setup_logging
from .models import PostEntity
from .repositories import Repository, get_repository
from .schemas import PostCreate
from .settings import get_settings
from .validation import validate_payload

logger = logging.getLogger(__name__)

_WORDS = (
    "alpha bravo canvas delta ember falcon garden harbor island jungle "
    "kettle lantern meadow nectar orbit pepper quartz river saddle timber "
    "umbra velvet willow xenon yonder zephyr anchor bramble cobalt dune"
).split()

cli = typer.Typer(name="seed", help="Create sample posts.", add_completion=False)


def random_words(count: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return " ".join(rng.choice(_WORDS) for _ in range(count))


# PUBLIC_INTERFACE
def make_post_payload(rng: Optional[random.Random] = None) -> PostCreate:
    """Build a valid PostCreate with a 5-word title and 50-word content."""
    return validate_payload(
        PostCreate,
        {"title": random_words(5, rng), "content": random_words(50, rng)},
    )


# PUBLIC_INTERFACE
def seed_posts(repo: Repository, count: int, rng: Optional[random.Random] = None) -> List[PostEntity]:
    """Create ``count`` sample posts in ``repo`` and return them."""
    created = [repo.create(make_post_payload(rng)) for _ in range(count)]
    logger.info("Seeded %d posts", len(created))
    return created


@cli.command()
def main(
    count: int = typer.Option(10, min=0, help="Number of posts to create"),
    seed: Optional[int] = typer.Option(None, help="Random seed for reproducible text"),
) -> None:
    """Create sample posts in the configured repository."""
    setup_logging(get_settings().log_level)
    created = seed_posts(get_repository(), count, random.Random(seed))
    typer.echo(f"Created {len(created)} posts")


if __name__ == "__main__":
    cli()
