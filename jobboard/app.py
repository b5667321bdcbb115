import argparse
import json
from pathlib import Path

from . import __version__
from .config import load_settings
from .database import get_session, init_database
from .env import load_env
from .errors import JobBoardError
from .logger import get_logger
from .recommendations import RecommendationStatus, get_recommendations
from .repositories import JobRepository, ProfileRepository
from .schema import validate_profile
from .storage import BUCKETS, ObjectStorage, UploadFile

UPLOAD_KINDS = ("resume", "profile-picture", "certification", "portfolio", "experience-logo")

NO_RECOMMENDATIONS_MESSAGE = "No recommendations found. Please update your profile for better matches."


def _load_json(path_str: str):
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _dump(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.db) if args.db else args.settings.db_path


def _session(args: argparse.Namespace):
    db_path = _db_path(args)
    if not db_path.exists():
        raise SystemExit(f"Database not found: {db_path}. Run 'init-db' first.")
    return get_session(db_path)


def cmd_init_db(args: argparse.Namespace) -> None:
    db_path = _db_path(args)
    init_database(db_path)
    print(f"Database ready: {db_path}")


def cmd_add_job(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    records = data if isinstance(data, list) else [data]
    session = _session(args)
    repo = JobRepository(session)
    added = failed = 0
    try:
        for record in records:
            try:
                job = repo.add_job(record)
            except (ValueError, JobBoardError) as e:
                print(f"[error] {record.get('id')} -> {e}")
                failed += 1
                continue
            print(f"[added] {job['id']} {job['title']}")
            added += 1
    finally:
        session.close()
    print(f"Done. added={added} failed={failed}")


def cmd_list(args: argparse.Namespace) -> None:
    session = _session(args)
    try:
        jobs = JobRepository(session).list_jobs()
    except JobBoardError as e:
        raise SystemExit(str(e))
    finally:
        session.close()
    for job in jobs:
        company = job["company"]["name"] if job["company"] else "-"
        print(f"{job['id']}: {job['title']} @ {company}")
    print(f"Total: {len(jobs)}")


def cmd_profile(args: argparse.Namespace) -> None:
    session = _session(args)
    try:
        profile = ProfileRepository(session).get_profile(args.user)
    except JobBoardError as e:
        raise SystemExit(str(e))
    finally:
        session.close()
    if profile is None:
        raise SystemExit(f"No profile for user: {args.user}")
    _dump(profile)


def cmd_validate_profile(args: argparse.Namespace) -> None:
    errors = validate_profile(_load_json(args.input))
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_save_profile(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    errors = validate_profile(data)
    if not data.get("user_id"):
        errors.append("Missing required field: user_id")
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)

    session = _session(args)
    repo = ProfileRepository(session)
    try:
        if repo.check_profile_exists(data["user_id"]):
            repo.upsert_profile(data)
            print("Profile updated successfully!")
        else:
            repo.create_profile(data)
            print("Profile created successfully!")
    except JobBoardError as e:
        raise SystemExit(str(e))
    finally:
        session.close()


def cmd_recommend(args: argparse.Namespace) -> None:
    limit = args.limit if args.limit is not None else args.settings.recommendation_limit
    if limit < 1:
        raise SystemExit("--limit must be at least 1")
    session = _session(args)
    try:
        result = get_recommendations(
            args.user,
            profiles=ProfileRepository(session),
            jobs=JobRepository(session),
            limit=limit,
        )
    finally:
        session.close()

    if result.status is RecommendationStatus.FETCH_ERROR:
        raise SystemExit(f"Could not load recommendations: {result.error}")
    if not result.found:
        print(NO_RECOMMENDATIONS_MESSAGE)
        return
    if args.json:
        _dump([item.to_dict() for item in result])
        return
    for rank, item in enumerate(result, 1):
        posting = item.posting
        company = posting.company.name if posting.company else "-"
        print(f"{rank}. [{item.score}] {posting.title} @ {company} ({posting.id})")


def _storage(args: argparse.Namespace) -> ObjectStorage:
    settings = args.settings
    try:
        return ObjectStorage(settings.storage_url, api_key=settings.storage_key)
    except ValueError as e:
        raise SystemExit(str(e))


def cmd_upload(args: argparse.Namespace) -> None:
    file_path = Path(args.file)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")
    file = UploadFile.from_path(file_path)
    storage = _storage(args)

    try:
        if args.kind == "resume":
            url = storage.upload_resume(args.user, file)
        elif args.kind == "profile-picture":
            url = storage.upload_profile_picture(args.user, file)
        elif args.kind == "certification":
            url = storage.upload_certification(args.user, args.name or file.name, file)
        elif args.kind == "portfolio":
            url = storage.upload_portfolio_item(args.user, args.name or file.name, file)
        else:
            if not args.name:
                raise SystemExit("--name (company name) is required for experience-logo")
            url = storage.upload_experience_logo(args.name, file)
    except (ValueError, JobBoardError) as e:
        raise SystemExit(str(e))
    print(url)

    if args.attach and args.kind in ("resume", "profile-picture"):
        field = "resume_url" if args.kind == "resume" else "profile_pic_url"
        session = _session(args)
        try:
            ProfileRepository(session).update_profile(args.user, {field: url})
        except JobBoardError as e:
            raise SystemExit(str(e))
        finally:
            session.close()
        print(f"Profile {field} updated")


def cmd_delete_file(args: argparse.Namespace) -> None:
    try:
        _storage(args).delete_file(args.bucket, args.path)
    except JobBoardError as e:
        raise SystemExit(str(e))
    print("Deleted")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board profiles, catalog and recommendations")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--db", default=None, help="Path to SQLite database (default: $JOBBOARD_DB_PATH or data/jobboard.db)")
    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init-db", help="Create database tables")
    init.set_defaults(func=cmd_init_db)

    add = subparsers.add_parser("add-job", help="Add job posting(s) from a JSON file")
    add.add_argument("--input", required=True, help="JSON object or list of job postings")
    add.set_defaults(func=cmd_add_job)

    lst = subparsers.add_parser("list", help="List the job catalog")
    lst.set_defaults(func=cmd_list)

    prof = subparsers.add_parser("profile", help="Show a user's profile")
    prof.add_argument("--user", required=True, help="User id")
    prof.set_defaults(func=cmd_profile)

    val = subparsers.add_parser("validate-profile", help="Validate a profile JSON file")
    val.add_argument("--input", required=True, help="Path to profile JSON")
    val.set_defaults(func=cmd_validate_profile)

    save = subparsers.add_parser("save-profile", help="Create or update a profile from JSON")
    save.add_argument("--input", required=True, help="Path to profile JSON")
    save.set_defaults(func=cmd_save_profile)

    rec = subparsers.add_parser("recommend", help="Recommend jobs for a user")
    rec.add_argument("--user", required=True, help="User id")
    rec.add_argument("--limit", type=int, default=None, help="Number of jobs (default: $RECOMMENDATION_LIMIT or 3)")
    rec.add_argument("--json", action="store_true", help="Print results as JSON")
    rec.set_defaults(func=cmd_recommend)

    up = subparsers.add_parser("upload", help="Upload a profile file to object storage")
    up.add_argument("--kind", required=True, choices=UPLOAD_KINDS, help="What is being uploaded")
    up.add_argument("--user", required=True, help="User id")
    up.add_argument("--file", required=True, help="Path to the file")
    up.add_argument("--name", default=None, help="Certification name, portfolio title, or company name")
    up.add_argument("--attach", action="store_true", help="Save the URL on the profile (resume, profile-picture)")
    up.set_defaults(func=cmd_upload)

    rm = subparsers.add_parser("delete-file", help="Delete an object from storage")
    rm.add_argument("--bucket", required=True, choices=BUCKETS, help="Bucket name")
    rm.add_argument("--path", required=True, help="Object name or public URL")
    rm.set_defaults(func=cmd_delete_file)

    return parser


def main(argv=None) -> None:
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        args.settings = load_settings()
    except ValueError as e:
        raise SystemExit(str(e))
    get_logger().configure(level=args.settings.log_level, log_dir=args.settings.log_dir)

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
