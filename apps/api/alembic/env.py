from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Importing the models registers their tables on Base.metadata
from studio_api.core.config import settings
from studio_api.core.database import Base
from studio_api.models.appointment import Appointment  # noqa: F401
from studio_api.models.appointment_history import AppointmentHistory  # noqa: F401
from studio_api.models.device_token import DeviceToken  # noqa: F401
from studio_api.models.employee import Employee  # noqa: F401
from studio_api.models.time_off import EmployeeTimeOff  # noqa: F401
from studio_api.models.work_override import WorkOverride  # noqa: F401
from studio_api.models.work_shift import WorkShift  # noqa: F401
from studio_api.models.working_hours import WorkingHoursRule  # noqa: F401

config = context.config

# The app's DATABASE_URL wins over alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite can only ALTER through table copies
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(str(connection.engine.url)))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
