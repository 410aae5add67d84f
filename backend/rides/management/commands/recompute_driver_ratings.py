import logging

from django.core.management.base import BaseCommand, CommandError

from services.gateway import RideGateway
from services.ratings import recompute_driver_rating

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Recompute each driver's rounded average rating from stored ratings."

    def add_arguments(self, parser):
        parser.add_argument(
            "--driver-id",
            type=int,
            default=None,
            help="Only recompute this driver (default: all drivers).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the averages without saving them.",
        )

    def handle(self, *args, **options):
        driver_id = options["driver_id"]
        dry_run = options["dry_run"]

        with RideGateway() as gateway:
            if driver_id is not None:
                if gateway.get_driver(driver_id) is None:
                    raise CommandError(f"Driver {driver_id} does not exist")
                driver_ids = [driver_id]
            else:
                driver_ids = gateway.get_all_driver_ids()

            updated = 0
            for current_id in driver_ids:
                if dry_run:
                    scores = [r.rating for r in gateway.get_driver_ratings(current_id)]
                    if scores:
                        self.stdout.write(
                            f"Driver {current_id}: {len(scores)} rating(s) {scores}, "
                            f"average {sum(scores) / len(scores):.2f}"
                        )
                    continue

                with gateway.atomic():
                    gateway.get_driver(current_id, for_update=True)
                    average = recompute_driver_rating(gateway, current_id)
                if average is not None:
                    updated += 1

        if dry_run:
            self.stdout.write(
                self.style.WARNING(f"DRY RUN: checked {len(driver_ids)} driver(s), nothing saved.")
            )
        else:
            logger.info("Recomputed ratings for %d driver(s)", updated)
            self.stdout.write(
                self.style.SUCCESS(f"Recomputed ratings for {updated} of {len(driver_ids)} driver(s).")
            )
