from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, insert, select
from sqlalchemy.pool import NullPool

metadata = MetaData()

chat_images = Table(
    "chat_images",
    metadata,
    Column("filename", String(255), nullable=False),
    Column("url", Text, nullable=False),
)


def open_engine(database_url):
    # NullPool: every engine.connect() opens a fresh connection, nothing is kept between requests
    return create_engine(database_url, poolclass=NullPool)


def insert_record(database_url, filename: str, url: str) -> None:
    """
    Insert one (filename, url) row on a connection opened for this call only.
    Raises sqlalchemy.exc.SQLAlchemyError on any store failure.
    """
    engine = open_engine(database_url)
    try:
        with engine.begin() as conn:
            conn.execute(insert(chat_images).values(filename=filename, url=url))
    finally:
        engine.dispose()


def fetch_records(database_url) -> list:
    engine = open_engine(database_url)
    try:
        with engine.connect() as conn:
            rows = conn.execute(select(chat_images.c.filename, chat_images.c.url)).all()
        return [{"filename": r.filename, "url": r.url} for r in rows]
    finally:
        engine.dispose()


def create_schema(database_url) -> None:
    engine = open_engine(database_url)
    try:
        metadata.create_all(engine)
    finally:
        engine.dispose()
