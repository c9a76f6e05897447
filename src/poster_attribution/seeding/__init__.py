"""Versioned seed data and the seeder that loads it."""

from poster_attribution.seeding.seed_data import SEED_DATA, SEED_VERSION, SeedEntry
from poster_attribution.seeding.seeder import KindReport, Seeder, SeedReport

__all__ = [
    "KindReport",
    "SEED_DATA",
    "SEED_VERSION",
    "SeedEntry",
    "SeedReport",
    "Seeder",
]
