"""
Management command to load sample registry data.

Usage:
    python manage.py seed_sample_data [--children 40] [--seed 7] [--flush]

Schools and proxies are matched by their unique names, so re-running the
command never duplicates them.  Sponsors and children are generated from
fixed name pools with a seeded RNG; each run adds ``--children`` more
children unless ``--flush`` clears the generated records first.
"""
from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

import structlog
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.registry.models import Child, Proxy, School, Sponsor, Sponsorship
from apps.registry.services import sponsorships

logger = structlog.get_logger(__name__)

SCHOOLS = [
    ("Kampala Primary School", "Kampala"),
    ("Entebbe Community School", "Entebbe"),
    ("Jinja Secondary School", "Jinja"),
    ("Mbale Primary School", "Mbale"),
    ("Gulu High School", "Gulu"),
]

PROXIES = [
    {
        "full_name": "Father Michael Ochieng",
        "contact": "+256701234567, St. Mary's Church",
        "role": "Priest",
        "description": "Local church leader helping with sponsorships",
    },
    {
        "full_name": "Sister Agnes Namalwa",
        "contact": "agnes@holyspirit.org, +256702345678",
        "role": "Nun",
        "description": "Works with children in rural communities",
    },
    {
        "full_name": "John Mukasa",
        "contact": "+256703456789, Community Center Leader",
        "role": "Community Leader",
        "description": "Local community organizer",
    },
]

SPONSOR_NAMES = [
    "Anna Keller", "Brian O'Neill", "Chiara Rossi", "David Okello", "Emma Larsen",
    "Felix Braun", "Grace Achieng", "Hannah Schmidt", "Isaac Mensah", "Julia Novak",
]

BOY_NAMES = ["Moses", "Joseph", "Samuel", "Brian", "Ivan", "Peter", "Daniel", "Emmanuel"]
GIRL_NAMES = ["Sarah", "Grace", "Mercy", "Agnes", "Esther", "Ruth", "Joan", "Patience"]
SURNAMES = ["Okello", "Namukasa", "Mugisha", "Atim", "Achieng", "Ssempala", "Nakato", "Opio"]
CLASSES = ["P1", "P2", "P3", "P4", "P5", "P6", "P7", "S1", "S2", "S3"]


class Command(BaseCommand):
    """Seed schools, proxies, sponsors and children for local development."""

    help = "Load sample schools, proxies, sponsors and children"

    def add_arguments(self, parser):
        parser.add_argument(
            "--children",
            type=int,
            default=40,
            help="Number of children to generate (default: 40)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=7,
            help="Random seed for reproducible sample data (default: 7)",
        )
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing children, sponsors and sponsorships first",
        )

    def handle(self, *args, **options):
        count = options["children"]
        if count < 0:
            raise CommandError("--children must be zero or a positive number")
        rng = random.Random(options["seed"])

        with transaction.atomic():
            if options["flush"]:
                Sponsorship.objects.all().delete()
                Child.objects.all().delete()
                Sponsor.objects.all().delete()

            schools = [
                School.objects.get_or_create(name=name, defaults={"location": location})[0]
                for name, location in SCHOOLS
            ]
            proxies = [
                Proxy.objects.get_or_create(full_name=p["full_name"], defaults=p)[0]
                for p in PROXIES
            ]
            sponsors = self._sponsors(rng, proxies)
            created = self._children(rng, schools, count)

            sponsored = 0
            for child in created:
                if rng.random() < 0.5:
                    sponsorships.add_sponsor(
                        child_id=child.id,
                        sponsor_id=rng.choice(sponsors).id,
                        monthly_amount=Decimal(rng.choice([25, 30, 40, 50])),
                        payment_method=rng.choice(["bank_transfer", "card", "mobile_money"]),
                    )
                    sponsored += 1

        logger.info(
            "sample_data_seeded",
            schools=len(schools),
            proxies=len(proxies),
            sponsors=len(sponsors),
            children=len(created),
            sponsored=sponsored,
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(schools)} schools, {len(proxies)} proxies, "
                f"{len(sponsors)} sponsors and {len(created)} children "
                f"({sponsored} sponsored)."
            )
        )

    def _sponsors(self, rng: random.Random, proxies: list[Proxy]) -> list[Sponsor]:
        sponsors = []
        for name in SPONSOR_NAMES:
            sponsor = Sponsor.objects.filter(full_name=name).first()
            if sponsor is None:
                # About a third of sponsors are in direct contact.
                proxy = rng.choice(proxies + [None])
                sponsor = Sponsor.objects.create(
                    full_name=name,
                    email=f"{name.lower().replace(' ', '.').replace(chr(39), '')}@example.org",
                    proxy=proxy,
                )
            sponsors.append(sponsor)
        return sponsors

    def _children(self, rng: random.Random, schools: list[School], count: int) -> list[Child]:
        today = date.today()
        children = []
        for _ in range(count):
            gender = rng.choice([Child.Gender.MALE, Child.Gender.FEMALE])
            first = rng.choice(BOY_NAMES if gender == Child.Gender.MALE else GIRL_NAMES)
            children.append(
                Child.objects.create(
                    first_name=first,
                    last_name=rng.choice(SURNAMES),
                    gender=gender,
                    date_of_birth=today - timedelta(days=rng.randint(5 * 365, 17 * 365)),
                    school=rng.choice(schools),
                    class_name=rng.choice(CLASSES),
                )
            )
        return children
