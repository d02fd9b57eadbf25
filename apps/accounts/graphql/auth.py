from rest_framework_simplejwt.authentication import JWTAuthentication


def resolve_user(info):
    """Return the requesting user, accepting a session or a Bearer JWT."""
    request = info.context.request
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user

    result = JWTAuthentication().authenticate(request)
    if result is None:
        raise PermissionError('Authentication required')
    return result[0]
