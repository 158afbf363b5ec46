from celery import shared_task

from hackhub.integrations.email import send_templated_email


@shared_task(name="teams.send_invite_email")
def send_team_invite_email(
    email: str, team_name: str, inviter_name: str, event_title: str
) -> bool:
    return send_templated_email(
        email,
        "team_invite",
        {
            "team_name": team_name,
            "inviter_name": inviter_name,
            "event_title": event_title,
        },
        subject=f"Team Invitation - {team_name}",
    )
