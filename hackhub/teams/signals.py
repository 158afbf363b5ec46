import logging

from django.db.models.signals import m2m_changed
from django.dispatch import receiver

from .models import Team

logger = logging.getLogger(__name__)


@receiver(m2m_changed, sender=Team.members.through)
def keep_leader_in_members(sender, instance, action, reverse, pk_set, **kwargs):
    if action not in ("post_remove", "post_clear"):
        return

    if reverse:
        # ``instance`` is a user removed from one or more teams.
        teams = Team.objects.filter(leader=instance)
        if action == "post_remove":
            teams = teams.filter(pk__in=pk_set or ())
        for team in teams:
            logger.warning("Re-adding leader %s to team %s", instance.pk, team.pk)
            team.members.add(instance)
        return

    if instance.leader_id and not instance.members.filter(pk=instance.leader_id).exists():
        logger.warning(
            "Re-adding leader %s to team %s", instance.leader_id, instance.pk
        )
        instance.members.add(instance.leader_id)
