import os

from dotenv import load_dotenv
from sqlmodel import Session, create_engine

# Load environment variables from .env file
load_dotenv()

# Connects app to the database holding perimeters and clock records


def build_database_url() -> str:
    # An explicit URL wins (e.g. sqlite for local runs)
    explicit_url = os.getenv("DATABASE_URL")
    if explicit_url:
        return explicit_url

    db_host = os.getenv("DB_HOST")
    db_port = os.getenv("DB_PORT", "5432")  # Default PostgreSQL port
    db_name = os.getenv("DB_NAME")
    db_user = os.getenv("DB_USER")
    db_password = os.getenv("DB_PASSWORD")
    instance_connection_name = os.getenv("INSTANCE_CONNECTION_NAME")  # For Cloud SQL Proxy

    if instance_connection_name:
        required_vars = ["DB_NAME", "DB_USER", "DB_PASSWORD"]
        missing_vars = [var for var in required_vars if not os.getenv(var)]
        if missing_vars:
            raise ValueError(
                f"Missing required environment variables for Cloud SQL (socket): {', '.join(missing_vars)}"
            )
        return (
            f"postgresql+psycopg2://{db_user}:{db_password}@/{db_name}"
            f"?host=/cloudsql/{instance_connection_name}"
        )

    if db_host:
        required_vars = ["DB_NAME", "DB_USER", "DB_PASSWORD"]
        missing_vars = [var for var in required_vars if not os.getenv(var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables for TCP: {', '.join(missing_vars)}")
        return f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    # Local development fallback
    return "sqlite:///shift_clock.db"


DATABASE_URL = build_database_url()

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# The Wire / Link That Lets Us Pass Data from App -> db
engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


# Getter for this Wire, modified for FastAPI dependency injection
def get_session():
    with Session(engine) as session:
        yield session
