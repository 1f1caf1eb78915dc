"""
Connection parameters from function arguments, environment variables
or a config file, in that order.

A config file is json or yaml (if pyyaml is installed) and holds named
sections, a section may inherit the keys of another one::

    {
        "default": {
            "caldav_url": "https://cal.example.com/dav/",
            "caldav_user": "alice",
            "caldav_pass": "secret"
        },
        "work": {"inherits": "default", "caldav_url": "https://work.example.com/"}
    }
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import Any
from typing import Dict
from typing import Optional

from minicaldav.io.sync import SyncIO
from minicaldav.lib.url import URL
from minicaldav.requests import BasicCredentials
from minicaldav.requests import BearerCredentials
from minicaldav.requests import Credentials

log = logging.getLogger(__name__)

## config file key -> connection parameter
CONFIG_KEYS = {
    "caldav_url": "url",
    "caldav_user": "username",
    "caldav_username": "username",
    "caldav_pass": "password",
    "caldav_password": "password",
    "caldav_token": "token",
    "caldav_timeout": "timeout",
    "caldav_ssl_verify_cert": "ssl_verify_cert",
}

## environment variable -> connection parameter
ENVIRONMENT_KEYS = {
    "MINICALDAV_URL": "url",
    "MINICALDAV_USERNAME": "username",
    "MINICALDAV_PASSWORD": "password",
    "MINICALDAV_TOKEN": "token",
    "MINICALDAV_TIMEOUT": "timeout",
    "MINICALDAV_SSL_VERIFY_CERT": "ssl_verify_cert",
}


def get_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = get_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn, interactive_error=False):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/minicaldav/calendar.conf",
            f"{cfgdir}/minicaldav/calendar.yaml",
            f"{cfgdir}/minicaldav/calendar.json",
            f"{cfgdir}/calendar.conf",
            "/etc/minicaldav/calendar.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## Late import.  yaml is an external module, and optional
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        return yaml.load(config_file, yaml.SafeLoader)
                except yaml.YAMLError:
                    log.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                log.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        log.info("no config file found")
    except ValueError:
        if interactive_error:
            log.error(
                "error in config file.  Be aware that the interactive configuration will ignore and overwrite the current broken config file",
                exc_info=True,
            )
        else:
            log.error("error in config file.  It will be ignored", exc_info=True)
    return {}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("0", "false", "no", "off", "")
    return bool(value)


@dataclass(frozen=True)
class ConnectionParams:
    url: URL
    credentials: Optional[Credentials] = None
    timeout: float = 30.0
    ssl_verify_cert: bool = True

    def io(self) -> SyncIO:
        """A transport set up according to these parameters"""
        return SyncIO(timeout=self.timeout, verify=self.ssl_verify_cert)


def get_connection_params(
    config_file: Optional[str] = None,
    config_section: Optional[str] = None,
    environment: bool = True,
    check_config_file: bool = True,
    **params,
) -> Optional[ConnectionParams]:
    """
    Collect connection parameters.

    Keyword arguments (url, username, password, token, timeout,
    ssl_verify_cert) win over MINICALDAV_* environment variables, which
    win over the config file.  The config file and section may be given
    as arguments or through MINICALDAV_CONFIG_FILE and
    MINICALDAV_CONFIG_SECTION.

    Returns None if no url was found anywhere.
    """
    found: Dict[str, Any] = {}

    if check_config_file:
        if environment:
            config_file = config_file or os.environ.get("MINICALDAV_CONFIG_FILE")
            config_section = config_section or os.environ.get(
                "MINICALDAV_CONFIG_SECTION"
            )
        cfg = read_config(config_file) or {}
        section = get_section(cfg, config_section or "default")
        for key, value in section.items():
            if key in CONFIG_KEYS:
                found[CONFIG_KEYS[key]] = value

    if environment:
        for key, param in ENVIRONMENT_KEYS.items():
            if os.environ.get(key):
                found[param] = os.environ[key]

    for key, value in params.items():
        if value is not None:
            found[key] = value

    if not found.get("url"):
        log.debug("no url found for the connection")
        return None

    credentials: Optional[Credentials] = None
    if found.get("token"):
        credentials = BearerCredentials(found["token"])
    elif found.get("username"):
        credentials = BasicCredentials(found["username"], found.get("password") or "")

    return ConnectionParams(
        url=URL.objectify(found["url"]),
        credentials=credentials,
        timeout=float(found.get("timeout", 30.0)),
        ssl_verify_cert=_to_bool(found.get("ssl_verify_cert", True)),
    )
