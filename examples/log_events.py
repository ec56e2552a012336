import json
import os
import time

import logunify
from logunify import LogUnifyEvent


class PageView(LogUnifyEvent):
    def __init__(self, path, user_id):
        self.path = path
        self.user_id = user_id

    def get_schema_name(self):
        return "page_view"

    def get_project_name(self):
        return "storefront"

    def serialize(self):
        return json.dumps({"path": self.path, "userId": self.user_id}).encode()


logunify.setup(
    api_key=os.getenv("LOGUNIFY_API_KEY"),
    receiver_url=os.getenv("LOGUNIFY_RECEIVER_URL"),
    batch_interval=2000,
    enable_debug_log=True,
)

for i in range(25):
    logunify.log(PageView(f"/products/{i}", user_id="u-42"))
    time.sleep(0.1)

# Flush whatever the timers have not delivered yet
logunify.close()
