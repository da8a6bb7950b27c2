"""
Application entry point.

Usage:
    python run.py

Starts the Flask development server on http://localhost:5000.
Submissions are forwarded to AUTH_SERVICE_URL (default http://localhost:8000).
"""

from authforms import create_app

app = create_app()

if __name__ == '__main__':
    print('\n  Credential intake forms')
    print('  =======================')
    print(f'  Authentication service: {app.config["AUTH_SERVICE_URL"]}')
    print('  URL: http://localhost:5000/api/forms/sign-in\n')

    app.run(
        host='127.0.0.1',
        port=5000,
        debug=True,
    )
