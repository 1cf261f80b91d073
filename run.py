"""
Development server entry point
Run the Flask application with: python run.py
"""
from odonto import create_app
import os

# Create Flask app instance
app = create_app()

if __name__ == '__main__':
    # Get host and port from environment or use defaults
    host = os.getenv('HOST', '0.0.0.0')
    port = app.config['PORT']
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    print(f"""
    ========================================
    {app.config['SERVICE_NAME']} v{app.config['SERVICE_VERSION']}
    ========================================
    Host: {host}
    Port: {port}
    Debug: {debug}
    Environment: {os.getenv('FLASK_ENV', 'development')}
    Database: {app.config['SQLALCHEMY_DATABASE_URI'].split('://')[0]}
    ========================================
    """)

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True  # Allow multiple requests
    )
