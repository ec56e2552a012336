import logging
import os

import logunify
from logunify import LogUnifyEvent


class Heartbeat(LogUnifyEvent):
    def get_schema_name(self):
        return "heartbeat"

    def get_project_name(self):
        return "ops"

    def serialize(self):
        return b"\x01"


logger = logging.getLogger("logunify")
fh = logging.FileHandler("logunify.log")
fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(process)d %(thread)d %(message)s"))
fh.setLevel(logging.DEBUG)
logger.addHandler(fh)

logunify.setup(api_key=os.getenv("LOGUNIFY_API_KEY"), enable_debug_log=True)

for _ in range(10):
    logunify.log(Heartbeat())

logunify.close()
