"""Auth event names recorded in the activity feed."""

AUTH_USER_REGISTERED = "auth.user.registered"
AUTH_PASSWORD_CHANGED = "auth.user.password_changed"
