#!/usr/bin/env python3
"""
Environment Configuration Generator for the field service backend

Writes a .env file with:
- Cryptographically secure SECRET_KEY for Flask sessions and CSRF
- A random password for the administrator account
- Database, HTTPS and logging settings

Usage:
    python generate_env.py              # Interactive mode
    python generate_env.py --force      # Overwrite existing .env
    python generate_env.py --dev        # Development mode (plain HTTP, predictable values)
"""

import argparse
import os
import secrets
import shutil
import string
import sys
from datetime import datetime
from pathlib import Path


class EnvGenerator:
    """Generate secure environment configuration"""

    def __init__(self, dev_mode=False, env_file=None):
        self.dev_mode = dev_mode
        self.env_file = Path(env_file) if env_file else Path(__file__).parent / '.env'

    def generate_secret_key(self, length=64):
        if self.dev_mode:
            return "dev-secret-key-DO-NOT-USE-IN-PRODUCTION"
        return secrets.token_hex(length)

    def generate_password(self, length=20):
        """
        Random password with at least one lowercase, uppercase, digit and symbol.
        """
        if self.dev_mode:
            return "admin987654321!"

        lowercase = string.ascii_lowercase
        uppercase = string.ascii_uppercase
        digits = string.digits
        # Safe special characters for .env files (no #, =, quotes)
        special = "!@$%^&*()_+-[]{}|;.,<>?"

        password = [
            secrets.choice(lowercase),
            secrets.choice(uppercase),
            secrets.choice(digits),
            secrets.choice(special),
        ]
        all_chars = lowercase + uppercase + digits + special
        password.extend(secrets.choice(all_chars) for _ in range(length - len(password)))
        secrets.SystemRandom().shuffle(password)
        return ''.join(password)

    def create_env_content(self):
        """Return (.env text, generated credentials)"""
        secret_key = self.generate_secret_key()
        admin_password = self.generate_password()
        database_url = "sqlite:///instance/fieldservice.db"
        secure = 'False' if self.dev_mode else 'True'

        content = f"""# Field service backend environment configuration
# Generated: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}
#
# SECURITY WARNING: Keep this file secret! Never commit to version control!

# Flask
SECRET_KEY={secret_key}
FLASK_DEBUG=False
FLASK_HOST=127.0.0.1
FLASK_PORT=5000

# Database (SQLite by default; any SQLAlchemy URL works)
DATABASE_URL={database_url}

# Administrator account created by the build step
ADMIN_USERNAME=admin
ADMIN_PASSWORD="{admin_password}"

# HTTPS and cookies (False ONLY for development over plain HTTP)
ENABLE_HTTPS={secure}
FORCE_HTTPS_REDIRECT={secure}
SESSION_COOKIE_SECURE={secure}
REMEMBER_COOKIE_SECURE={secure}
PERMANENT_SESSION_LIFETIME=3600
REMEMBER_COOKIE_DURATION=86400

# Logging
LOG_DIR=logs
"""
        return content, {
            'secret_key': secret_key,
            'admin_password': admin_password,
            'database_url': database_url,
        }

    def create_backup(self):
        if not self.env_file.exists():
            return None
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        backup_path = self.env_file.parent / f'.env.backup.{stamp}'
        shutil.copy2(self.env_file, backup_path)
        return backup_path

    def write_env_file(self, content):
        with open(self.env_file, 'w') as f:
            f.write(content)
        # Owner read/write only
        os.chmod(self.env_file, 0o600)

    def generate(self, force=False):
        if self.env_file.exists() and not force:
            print(f"\nFile {self.env_file} already exists!")
            response = input("Do you want to overwrite it? (yes/no): ").lower().strip()
            if response not in ['yes', 'y']:
                print("Aborted. Existing .env file was not modified.")
                return False
            backup_path = self.create_backup()
            if backup_path:
                print(f"Backup created: {backup_path}")

        content, credentials = self.create_env_content()
        self.write_env_file(content)
        print(f"Created: {self.env_file}")
        print(f"Admin user: admin / {credentials['admin_password']}")
        print("This is the ONLY time the password is displayed.")
        print("Next: python run.py --build-only")
        if self.dev_mode:
            print("DEV MODE: do not use this configuration in production!")
        return True


def main():
    parser = argparse.ArgumentParser(description='Generate secure .env configuration')
    parser.add_argument('--force', '-f', action='store_true',
                        help='Overwrite existing .env file without prompting')
    parser.add_argument('--dev', '-d', action='store_true',
                        help='Development mode: plain HTTP and predictable values (NOT FOR PRODUCTION!)')
    args = parser.parse_args()

    generator = EnvGenerator(dev_mode=args.dev)
    sys.exit(0 if generator.generate(force=args.force) else 1)


if __name__ == '__main__':
    main()
