from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from studio_api.services.business_time import as_utc

# Instants leave the API in UTC, whatever the backend handed back
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
