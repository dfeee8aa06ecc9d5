#!/usr/bin/env python3
"""
Celery Worker Entry Point
Run with: celery -A celery_worker.celery worker --beat --loglevel=info
Or: python celery_worker.py
"""
from siddha_savor import create_app
from siddha_savor.extensions import celery

# Create Flask app to initialize Celery (also registers the tasks package)
app = create_app()

if __name__ == '__main__':
    # For development: run worker with the embedded beat scheduler
    celery.worker_main([
        'worker',
        '--beat',
        '--loglevel=info',
        '--concurrency=4'
    ])
