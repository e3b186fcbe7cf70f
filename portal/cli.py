"""
Tenant Portal - Command Line Interface

Subcommands:
- serve: Run the portal with uvicorn
- seed: Create a tenant and admin account (idempotent)
- encrypt-secrets: Encrypt tenant secrets still stored as plaintext
- hash-password: Print a bcrypt hash for a password
- generate-key: Print a new KMS master key
"""

import argparse
import getpass
import sys

from portal import __version__
from portal.config import get_settings


def run_server(host: str | None, port: int | None, reload: bool = False) -> int:
    """Run the uvicorn server"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "portal.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="debug" if settings.debug else "info",
    )
    return 0


def run_seed(tenant_id: str, tenant_name: str, email: str | None, password: str | None, plan: str) -> int:
    """Create the tenant and admin if they do not exist"""
    from portal.database import SessionLocal, init_db
    from portal.services.bootstrap import seed_tenant

    settings = get_settings()
    init_db()

    db = SessionLocal()
    try:
        result = seed_tenant(
            db,
            admin_email=email or settings.seed_admin_email,
            admin_password=password or settings.seed_admin_password,
            tenant_id=tenant_id,
            tenant_name=tenant_name,
            plan=plan,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    else:
        print(f"Tenant: {result.tenant.id} ({'created' if result.tenant_created else 'exists'})")
        print(f"Admin:  {result.admin.email} ({'created' if result.admin_created else 'exists'})")
    finally:
        db.close()
    return 0


def run_encrypt_secrets() -> int:
    """Backfill envelopes for plaintext tenant secrets"""
    from portal.database import SessionLocal
    from portal.services.kms import get_cipher
    from portal.services.tenant_secrets import encrypt_legacy_secrets

    cipher = get_cipher()
    if not cipher.has_key():
        print("Error: PORTAL_KMS_MASTER_KEY is required", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        count = encrypt_legacy_secrets(db, cipher)
    finally:
        db.close()
    print(f"Encrypted {count} secret value(s). Done.")
    return 0


def run_hash_password(password: str | None) -> int:
    from portal.services.passwords import hash_password

    password = password or getpass.getpass("Password: ")
    if not password:
        print("Error: password must not be empty", file=sys.stderr)
        return 1
    print(hash_password(password))
    return 0


def run_generate_key() -> int:
    from portal.services.kms import generate_master_key

    print(generate_master_key())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tenant-portal",
        description="Tenant Portal - Multi-Tenant Admin Portal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tenant-portal serve --port 3000
  tenant-portal seed --tenant acme --name "Acme Inc" --email owner@acme.test
  PORTAL_KMS_MASTER_KEY=... tenant-portal encrypt-secrets
  tenant-portal generate-key
""",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"Tenant Portal {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the portal server")
    serve.add_argument("--host", help="Host to bind to (default: from settings)")
    serve.add_argument("--port", "-p", type=int, help="Port to listen on (default: from settings)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")

    seed = commands.add_parser("seed", help="Create a tenant and admin account")
    seed.add_argument("--tenant", default="default", help="Tenant id / subdomain (default: default)")
    seed.add_argument("--name", default="Default Tenant", help="Tenant display name")
    seed.add_argument("--email", help="Admin email (default: PORTAL_SEED_ADMIN_EMAIL)")
    seed.add_argument("--password", help="Admin password (default: PORTAL_SEED_ADMIN_PASSWORD)")
    seed.add_argument("--plan", default="basic", help="Plan for a new tenant (default: basic)")

    commands.add_parser("encrypt-secrets", help="Encrypt plaintext tenant secrets")

    hash_cmd = commands.add_parser("hash-password", help="Print a bcrypt hash")
    hash_cmd.add_argument("password", nargs="?", help="Password (prompted when omitted)")

    commands.add_parser("generate-key", help="Print a new KMS master key")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        return run_server(args.host, args.port, reload=args.reload)
    if args.command == "seed":
        return run_seed(args.tenant, args.name, args.email, args.password, args.plan)
    if args.command == "encrypt-secrets":
        return run_encrypt_secrets()
    if args.command == "hash-password":
        return run_hash_password(args.password)
    if args.command == "generate-key":
        return run_generate_key()
    return 2


if __name__ == "__main__":
    sys.exit(main())
