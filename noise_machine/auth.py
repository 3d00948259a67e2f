"""
Access gate.

Requests from loopback or private networks go straight through. Everything
else needs HTTP Basic credentials matching AUTH_USER / AUTH_PASSWORD.
"""

import hmac
import ipaddress
import logging
import os
from functools import wraps

from flask import Response, request

logger = logging.getLogger(__name__)

PRIVATE_NETWORKS = (
    ipaddress.ip_network('10.0.0.0/8'),
    ipaddress.ip_network('172.16.0.0/12'),
    ipaddress.ip_network('192.168.0.0/16'),
    ipaddress.ip_network('fc00::/7'),
)
BROADCAST = ipaddress.ip_address('255.255.255.255')


def _is_global_unicast(ip) -> bool:
    return not (
        ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_unspecified
        or ip == BROADCAST
    )


def is_trusted_address(addr) -> bool:
    """True for loopback, private-range and other non-routable origins"""
    if not addr:
        return False
    try:
        ip = ipaddress.ip_address(str(addr).strip().strip('[]'))
    except ValueError:
        return False
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    if any(ip in net for net in PRIVATE_NETWORKS if net.version == ip.version):
        return True
    return not _is_global_unicast(ip)


def _credentials():
    return os.environ.get('AUTH_USER', ''), os.environ.get('AUTH_PASSWORD', '')


def _matches(given, expected: str) -> bool:
    return hmac.compare_digest((given or '').encode(), expected.encode())


def _unauthorized(challenge: bool = True) -> Response:
    response = Response('Unauthorized\n', status=401, mimetype='text/plain')
    if challenge:
        response.headers['WWW-Authenticate'] = 'Basic realm="Restricted"'
    return response


def requires_auth(f):
    """Decorator to require Basic Auth for requests from public addresses"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if is_trusted_address(request.remote_addr):
            return f(*args, **kwargs)

        username, password = _credentials()
        if not username or not password:
            logger.warning('External access is blocked because AUTH_USER and AUTH_PASSWORD are not set.')
            return _unauthorized(challenge=False)

        auth = request.authorization
        if auth is None or auth.type != 'basic':
            return _unauthorized()
        # Compare both fields unconditionally
        user_ok = _matches(auth.username, username)
        pass_ok = _matches(auth.password, password)
        if not (user_ok and pass_ok):
            logger.warning('Rejected credentials from %s', request.remote_addr)
            return _unauthorized()
        return f(*args, **kwargs)
    return decorated_function
