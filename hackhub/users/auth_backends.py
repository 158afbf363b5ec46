from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailBackend(ModelBackend):
    """Authenticate with a case-insensitive email address."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        usermodel = get_user_model()
        email = kwargs.get(usermodel.USERNAME_FIELD) or username
        if not email or password is None:
            return None
        try:
            user = usermodel.objects.get(email__iexact=email.strip())
        except usermodel.DoesNotExist:
            # Run the default password hasher once to reduce the timing
            # difference between an existing and a nonexistent user.
            usermodel().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
