"""
Tests for CSRF protection.

Uses CSRFTestConfig which enables flask-wtf CSRFProtect. JSON clients
fetch a token from /api/csrf-token and send it in the X-CSRFToken header.
"""


class TestCSRFProtection:
    """Tests for CSRF token validation."""

    def test_submit_without_csrf_token_fails(self, csrf_client, actions, sign_in_values):
        """POST without a CSRF token is rejected before anything is sent."""
        response = csrf_client.post('/api/forms/sign-in/submit', json=sign_in_values)

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'csrf'
        assert 'form session has expired' in data['message']
        assert actions['sign-in'].calls == []

    def test_submit_with_valid_csrf_token_succeeds(self, csrf_client, sign_in_values):
        """POST with a valid token in the header proceeds normally."""
        csrf_token = csrf_client.get('/api/csrf-token').get_json()['csrf_token']
        assert csrf_token

        response = csrf_client.post(
            '/api/forms/sign-in/submit',
            json=sign_in_values,
            headers={'X-CSRFToken': csrf_token},
        )

        assert response.status_code == 200
        assert response.get_json()['success'] is True

    def test_submit_with_forged_token_fails(self, csrf_client, sign_in_values):
        csrf_client.get('/api/csrf-token')
        response = csrf_client.post(
            '/api/forms/sign-in/submit',
            json=sign_in_values,
            headers={'X-CSRFToken': 'forged'},
        )
        assert response.status_code == 400
        assert response.get_json()['error'] == 'csrf'

    def test_live_validation_is_exempt(self, csrf_client):
        """Validation has no side effects and runs on every keystroke: no token needed."""
        response = csrf_client.post('/api/forms/sign-in/validate', json={'email': 'jean'})
        assert response.status_code == 200

    def test_password_strength_is_exempt(self, csrf_client):
        response = csrf_client.post('/api/password-strength', json={'password': 'abc'})
        assert response.status_code == 200
