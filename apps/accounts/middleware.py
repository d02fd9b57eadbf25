from django.http import JsonResponse
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed


class DeactivatedAccountMiddleware:
    """Block API access for client accounts an admin has deactivated."""

    auth_excluded_prefixes = (
        '/api/v1/auth/login/',
        '/api/v1/auth/logout/',
        '/api/v1/auth/token/',
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith('/api/') and not request.path.startswith(self.auth_excluded_prefixes):
            user = self.get_user(request)
            if user is not None and user.is_client and not user.is_account_active:
                return JsonResponse({'error': 'account_deactivated'}, status=403)

        return self.get_response(request)

    def get_user(self, request):
        header = request.META.get('HTTP_AUTHORIZATION')
        if not header or not header.startswith('Bearer '):
            return None

        auth = JWTAuthentication()
        try:
            validated_token = auth.get_validated_token(header.split(' ')[1].encode('utf-8'))
            return auth.get_user(validated_token)
        except (InvalidToken, AuthenticationFailed):
            # Let the view's authentication produce the 401
            return None
