"""
Shared constants for edgesync.
"""

# Default number of concurrent store operations
DEFAULT_CONCURRENCY = 10

# Retry policy for uploads and purge submissions: the first try plus 3 retries,
# waiting 1s, 2s, then 4s
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_INITIAL_DELAY = 1.0

# DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000

# PurgeUrlsCache accepts at most 1000 URLs per request
CDN_PURGE_BATCH_SIZE = 1000

# EdgeOne plans with a per-submission URL limit at or below this are quota constrained
CONSTRAINED_PLAN_BATCH_LIMIT = 500

# Index document served for directory URLs
INDEX_DOCUMENT = "index.html"

# Supported cache backends
CACHE_TYPE_CDN = "cdn"
CACHE_TYPE_EDGEONE = "edgeone"
CACHE_TYPES = (CACHE_TYPE_CDN, CACHE_TYPE_EDGEONE)

# Tencent Cloud API endpoints (host, service, version)
CDN_API = ("cdn.tencentcloudapi.com", "cdn", "2018-06-06")
EDGEONE_API = ("teo.tencentcloudapi.com", "teo", "2022-09-01")

# COS S3-compatible endpoint
COS_ENDPOINT_TEMPLATE = "https://cos.{region}.myqcloud.com"
