
cur_version = "v1"

version_prefix = f"/api/{cur_version}"
