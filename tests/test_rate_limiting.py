"""
Tests for rate limiting on the submit endpoint.

Uses RateLimitTestConfig which enables flask-limiter.
Tests verify per-IP and per-account rate limits.
"""


class TestSubmitRateLimits:
    """Per-IP and per-account limits on submissions."""

    def test_under_limit_succeeds(self, rate_limit_client, sign_in_values):
        """Submissions under the rate limit succeed normally."""
        response = rate_limit_client.post('/api/forms/sign-in/submit', json=sign_in_values)
        assert response.status_code == 200

    def test_over_account_limit_returns_429(self, rate_limit_app, rate_limit_client, actions, sign_in_values):
        """Repeated submissions for one email hit the per-account limit."""
        rate_limit_app.config['SUBMIT_RATE_LIMIT_ACCOUNT'] = '2/minute'

        statuses = [
            rate_limit_client.post('/api/forms/sign-in/submit', json=sign_in_values).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 429]
        assert len(actions['sign-in'].calls) == 2

    def test_account_key_ignores_case_and_spaces(self, rate_limit_app, rate_limit_client, sign_in_values):
        rate_limit_app.config['SUBMIT_RATE_LIMIT_ACCOUNT'] = '1/minute'
        rate_limit_client.post('/api/forms/sign-in/submit', json=sign_in_values)
        response = rate_limit_client.post('/api/forms/sign-in/submit', json={
            'email': '  JEAN.DUPONT@exemple.com ',
            'password': 'Secret123!',
        })
        assert response.status_code == 429

    def test_over_ip_limit_returns_429(self, rate_limit_app, rate_limit_client):
        """Different emails from one client hit the per-IP limit."""
        rate_limit_app.config['SUBMIT_RATE_LIMIT_IP'] = '2/minute'

        for i in range(2):
            rate_limit_client.post('/api/forms/sign-in/submit', json={
                'email': f'user{i}@exemple.com',
                'password': 'Secret123!',
            })
        response = rate_limit_client.post('/api/forms/sign-in/submit', json={
            'email': 'user9@exemple.com',
            'password': 'Secret123!',
        })

        assert response.status_code == 429
        assert response.get_json()['error'] == 'rate_limited'

    def test_live_validation_not_limited_by_submit_limits(self, rate_limit_app, rate_limit_client):
        """Keystroke validation only counts against the generous default limit."""
        rate_limit_app.config['SUBMIT_RATE_LIMIT_IP'] = '1/minute'
        for _ in range(10):
            response = rate_limit_client.post('/api/forms/sign-in/validate', json={'email': 'j'})
        assert response.status_code == 200
