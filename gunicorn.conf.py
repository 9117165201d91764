# Gunicorn config - simple sensible defaults
import os

bind = '0.0.0.0:' + os.getenv('PORT', '5000')
workers = 2
# LINE expects the webhook to answer quickly; the HotPepper call is bounded by
# SEARCH_TIMEOUT_SEC and the reply by REPLY_TIMEOUT_SEC, so 30s is ample.
timeout = 30
accesslog = '-'  # stdout
errorlog = '-'   # stderr
