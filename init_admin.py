#!/usr/bin/env python3
"""
Seed the admin accounts that approve doctors and issue doctor invites.
Run with: python3 init_admin.py
Override the default with ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
"""
import os

from siddha_savor import create_app
from siddha_savor.extensions import db
from siddha_savor.models import Admin

# Default admin users to create
DEFAULT_ADMINS = [
    {
        'name': os.getenv('ADMIN_NAME', 'Siddha Savor Admin'),
        'email': os.getenv('ADMIN_EMAIL', 'admin@siddhasavor.com'),
        'password': os.getenv('ADMIN_PASSWORD', 'admin123'),
    },
]


def create_admins():
    """Create default admin users"""
    app = create_app()

    with app.app_context():
        db.create_all()

        print("=" * 60)
        print("Initializing Admin Users")
        print("=" * 60)
        print()

        created_count = 0

        for admin_data in DEFAULT_ADMINS:
            email = admin_data['email'].strip().lower()

            existing = Admin.query.filter_by(email=email).first()
            if existing:
                print(f"  - Admin '{email}' already exists (skipping)")
                continue

            admin = Admin(name=admin_data['name'], email=email)
            admin.set_password(admin_data['password'])

            db.session.add(admin)
            created_count += 1
            print(f"  ✓ Created: {email} - Password: {admin_data['password']}")

        db.session.commit()

        print()
        print("=" * 60)
        print(f"✅ Created {created_count} new admin user(s)")
        print("=" * 60)
        print("\n⚠️  IMPORTANT: Change passwords after first login!")


if __name__ == '__main__':
    create_admins()
