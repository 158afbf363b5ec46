from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from hackhub.audit.utils import log_action
from hackhub.users.models import User


class Command(BaseCommand):
    help = "Grant (or with --demote, revoke) the organizer role for a user"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("email", help="Email address of the account")
        parser.add_argument(
            "--demote",
            action="store_true",
            help="Set the role back to participant",
        )

    def handle(self, *args, **options) -> None:
        email: str = options["email"].strip()
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            msg = f"No user with email {email}"
            raise CommandError(msg)

        role = User.Role.PARTICIPANT if options["demote"] else User.Role.ORGANIZER
        if user.role == role:
            self.stdout.write(f"{user.email} is already {role}")
            return

        before = user.role
        user.role = role
        user.save(update_fields=["role", "updated_at"])
        log_action(
            "user_role_changed",
            target=user,
            before={"role": before},
            after={"role": role},
        )
        self.stdout.write(self.style.SUCCESS(f"{user.email} is now {role}"))
