#!/usr/bin/env python3
import os
import logging
from flask import Flask, request, abort

from config import ConfigError, SECRET_KEYS, load_config, load_secrets_from_files
from hotpepper import SearchError
from reply import ReplyError
from sentry_init import init_sentry, capture_exception as sentry_capture_exception
from webhook import InvalidSignature, build_bot, handle_callback

app = Flask(__name__)

# Render's Secret Files feature writes plaintext files to /etc/secrets/<NAME>.
load_secrets_from_files(SECRET_KEYS)

# logging configuration (env: LOG_LEVEL, LOG_FILE)
log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
log_file = os.getenv('LOG_FILE')
if log_file:
    log_handlers = [logging.FileHandler(log_file), logging.StreamHandler()]
else:
    log_handlers = [logging.StreamHandler()]
logging.basicConfig(level=getattr(logging, log_level, logging.INFO), format='%(asctime)s %(levelname)s %(message)s', handlers=log_handlers)
logger = logging.getLogger(__name__)

if init_sentry():
    logger.info('Sentry initialized')

try:
    bot = build_bot(load_config())
except ConfigError as e:
    logger.error('bot disabled: %s', e)
    bot = None


@app.route('/healthz', methods=['GET'])
def healthz():
    return 'ok', 200


@app.route('/callback', methods=['POST'])
def callback():
    signature = request.headers.get('X-Line-Signature', '')
    body = request.get_data(as_text=True)
    try:
        return handle_callback(bot, body, signature)
    except InvalidSignature:
        abort(400)
    except (SearchError, ReplyError) as e:
        logger.exception('webhook processing failed')
        sentry_capture_exception(e)
        abort(500)


@app.route('/_debug/handler_status', methods=['GET'])
def _debug_handler_status():
    # booleans only, never the values
    return {
        'bot_initialized': bool(bot),
        'env_presence': {k: (os.getenv(k) is not None) for k in SECRET_KEYS},
    }, 200


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 5000)))
