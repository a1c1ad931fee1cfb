"""Periodic scan applying time-based status changes to scheduled and active events."""

from django.core.management.base import BaseCommand, CommandError

from competitions.domain.errors import InvalidIdentifierError
from competitions.models import Group
from competitions.services import get_event_service


class Command(BaseCommand):
    help = "Promote scheduled and active events whose start or end time has passed."

    def add_arguments(self, parser):
        parser.add_argument(
            "--group",
            action="append",
            dest="groups",
            help="Only scan this group ID. May be given more than once.",
        )

    def handle(self, *args, **options):
        group_ids = options["groups"] or [
            str(pk) for pk in Group.objects.values_list("pk", flat=True)
        ]
        service = get_event_service()
        total = 0
        for group_id in group_ids:
            try:
                promoted = service.auto_promote_group(group_id)
            except InvalidIdentifierError as exc:
                raise CommandError(f"{group_id}: {exc.message}") from exc
            total += len(promoted)
            for event in promoted:
                self.stdout.write(f"{event.id} -> {event.status.value}")
        self.stdout.write(self.style.SUCCESS(f"Promoted {total} event(s)"))
