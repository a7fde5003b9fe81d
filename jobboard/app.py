import argparse

from storage.repositories import JobRepository

from . import __version__
from .cleanup import cleanup_expired_jobs
from .database import get_session_factory, init_database
from .env import Settings, load_env
from .logger import get_logger
from .retry import RetryError


def _engine(settings: Settings):
    try:
        return init_database(
            settings.database_url,
            timeout=settings.db_timeout,
            retries=settings.db_connect_retries,
        )
    except RetryError as e:
        get_logger().critical("Database connection failed", error=str(e))
        raise SystemExit(f"Database connection failed: {e}")


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from .api import create_app

    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    engine = _engine(settings)
    app = create_app(settings, session_factory=get_session_factory(engine))
    get_logger().info("Starting server", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def cmd_init_db(args: argparse.Namespace, settings: Settings) -> None:
    _engine(settings)
    print(f"Database initialized: {settings.database_url}")


def cmd_cleanup(args: argparse.Namespace, settings: Settings) -> None:
    repo = JobRepository(get_session_factory(_engine(settings)))
    before, after = cleanup_expired_jobs(repo)
    print(f"Done. before={before} removed={before - after} remaining={after}")


def cmd_list(args: argparse.Namespace, settings: Settings) -> None:
    repo = JobRepository(get_session_factory(_engine(settings)))
    jobs = repo.find_all()
    if not jobs:
        print("No jobs in store.")
        return
    print(f"Found {len(jobs)} jobs:\n")
    for job in jobs:
        print(f"ID: {job.id}")
        print(f"  Title: {job.title}")
        print(f"  Company: {job.company}")
        print(f"  Seniority: {job.seniority_level}")
        print(f"  Field: {job.field}")
        print(f"  URL: {job.url}")
        print(f"  Expires: {job.expires_at.isoformat(timespec='seconds')}Z")
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board REST backend")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--database-url", help="SQLAlchemy URL (or set JOBBOARD_DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    srv = subparsers.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", help="Bind address (default: JOBBOARD_HOST or 0.0.0.0)")
    srv.add_argument("--port", type=int, help="Port (default: JOBBOARD_PORT or 8080)")
    srv.set_defaults(func=cmd_serve)

    ini = subparsers.add_parser("init-db", help="Create tables and indexes")
    ini.set_defaults(func=cmd_init_db)

    cln = subparsers.add_parser("cleanup", help="Purge expired jobs")
    cln.set_defaults(func=cmd_cleanup)

    lst = subparsers.add_parser("list", help="List all stored jobs")
    lst.set_defaults(func=cmd_list)
    return parser


def main(argv=None):
    # Load .env if present (JOBBOARD_DATABASE_URL, JOBBOARD_PORT, etc.)
    load_env()
    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return

    settings = Settings()
    if args.database_url:
        settings.database_url = args.database_url
    get_logger().configure(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_to_file,
    )

    if hasattr(args, "func"):
        args.func(args, settings)
        return

    build_parser().print_help()


if __name__ == "__main__":
    main()
