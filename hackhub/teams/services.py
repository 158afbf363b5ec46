"""Team membership transitions.

Every function checks its preconditions and raises the matching API error
before touching the database. Join and leave lock the team row so the
capacity check and the membership write happen in one step.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from hackhub.audit.utils import log_action
from hackhub.core.exceptions import Conflict
from hackhub.core.exceptions import MembershipError
from hackhub.core.tasks import enqueue_on_commit
from hackhub.events.models import Event
from hackhub.notifications.models import Notification
from hackhub.notifications.utils import notify

from .models import Team
from .tasks import send_team_invite_email

logger = logging.getLogger(__name__)

User = get_user_model()


def _lock(team: Team) -> Team:
    return Team.objects.select_for_update().get(pk=team.pk)


def _require_leader(team: Team, user, message: str) -> None:
    if not team.is_leader(user):
        raise PermissionDenied(message)


def create_team(
    *, leader, event_id: int, name: str, max_members: int | None = None
) -> Team:
    event = Event.objects.filter(pk=event_id).first()
    if event is None:
        msg = "Event not found"
        raise NotFound(msg)

    with transaction.atomic():
        team = Team.objects.create(
            name=name,
            leader=leader,
            event=event,
            max_members=max_members or event.max_team_size,
        )
        log_action(
            "team_created",
            actor=leader,
            target=team,
            after={"name": team.name, "event": event.pk},
        )
    return team


def join_team(team: Team, user) -> Team:
    with transaction.atomic():
        team = _lock(team)
        if team.members.filter(pk=user.pk).exists():
            msg = "You are already a member of this team"
            raise Conflict(msg)
        if team.members.count() >= team.max_members:
            msg = "Team is full"
            raise Conflict(msg)

        team.members.add(user)
        notify(
            team.leader,
            notification_type=Notification.Type.TEAM_JOIN,
            title="New Team Member",
            message=f"{user.name} joined your team {team.name}",
            related=team,
        )
        log_action("team_joined", actor=user, target=team)
    return team


def leave_team(team: Team, user) -> Team:
    with transaction.atomic():
        team = _lock(team)
        if not team.members.filter(pk=user.pk).exists():
            msg = "You are not a member of this team"
            raise MembershipError(msg)
        if team.is_leader(user):
            msg = (
                "Team leader cannot leave. "
                "Please delete the team or transfer leadership."
            )
            raise MembershipError(msg)

        team.members.remove(user)
        log_action("team_left", actor=user, target=team)
    return team


def invite_to_team(team: Team, inviter, email: str) -> Notification:
    """Notify ``email``'s account about the team and email them an invite.

    The email goes out after commit; its failure does not undo the
    notification.
    """

    _require_leader(team, inviter, "Only team leader can invite members")

    invitee = User.objects.filter(email__iexact=email.strip()).first()
    if invitee is None:
        msg = "User not found with this email"
        raise NotFound(msg)
    if team.members.filter(pk=invitee.pk).exists():
        msg = "User is already a member of this team"
        raise Conflict(msg)

    event_title = team.event.title
    with transaction.atomic():
        notification = notify(
            invitee,
            notification_type=Notification.Type.TEAM_INVITE,
            title="Team Invitation",
            message=(
                f"{inviter.name} invited you to join team {team.name} "
                f"for {event_title}"
            ),
            related=team,
        )
        log_action(
            "team_invite_sent",
            actor=inviter,
            target=team,
            message=f"invitee={invitee.pk}",
        )
        enqueue_on_commit(
            send_team_invite_email,
            invitee.email,
            team.name,
            inviter.name,
            event_title,
        )
    return notification


def update_team(
    team: Team, user, *, name: str | None = None, max_members: int | None = None
) -> Team:
    _require_leader(team, user, "Only team leader can update the team")

    with transaction.atomic():
        team = _lock(team)
        before = {"name": team.name, "max_members": team.max_members}
        if max_members is not None:
            current = team.members.count()
            if max_members < current:
                raise ValidationError(
                    {
                        "max_members": [
                            f"Team already has {current} members; "
                            "capacity cannot be lower."
                        ]
                    }
                )
            team.max_members = max_members
        if name:
            team.name = name
        team.save()
        log_action(
            "team_updated",
            actor=user,
            target=team,
            before=before,
            after={"name": team.name, "max_members": team.max_members},
        )
    return team


def delete_team(team: Team, user) -> None:
    """Remove the team; member and event references go with it."""

    _require_leader(team, user, "Only team leader can delete the team")

    with transaction.atomic():
        log_action(
            "team_deleted",
            actor=user,
            target=team,
            before={
                "name": team.name,
                "event": team.event_id,
                "members": list(team.members.values_list("id", flat=True)),
            },
        )
        team.delete()
