#!/usr/bin/env python3
"""Auto-DevOps Agent - development server"""
import os

from devops_agent import create_app

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_ENV') == 'development'
    base_path = app.config['BASE_PATH'].rstrip('/')

    print(f"[SERVER] Auto-DevOps Agent on http://localhost:{port}{base_path}/")
    print(f"[SERVER] Pipeline generator: {app.config['GENERATOR_URL']}")

    app.run(host='0.0.0.0', port=port, debug=debug)
