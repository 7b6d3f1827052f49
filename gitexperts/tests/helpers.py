from datetime import datetime, timezone

from gitexperts.blame import RawAttributionRecord


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def record(line, commit, name, email, when) -> RawAttributionRecord:
    return RawAttributionRecord(
        line_number=line,
        commit_id=commit,
        author_name=name,
        author_email=email,
        commit_timestamp=when
    )
