"""
Configuration file reading.  A config file is a json (or yaml) dict of
sections; each section is a dict of settings, and may name another
section under "inherits" to start out from.

    {
        "default": {
            "ews_url": "https://mail.example.com/EWS/Exchange.asmx",
            "ews_user": "booking-reader",
            "ews_pass": "secret"
        },
        "rooms": {"inherits": "default", "ews_impersonate": true}
    }
"""
import json
import logging
import os


def config_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/ewsbooking/ewsbooking.conf",
            f"{cfgdir}/ewsbooking/ewsbooking.yaml",
            f"{cfgdir}/ewsbooking/ewsbooking.json",
            "/etc/ewsbooking.conf",
            "/etc/ewsbooking/ewsbooking.conf",
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
            ## Late import, wrapped in try/except.  yaml is external module,
            ## and not included in the requirements as for now.
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        cfg = yaml.load(config_file, yaml.SafeLoader)
                    if isinstance(cfg, dict):
                        return cfg
                    logging.error(f"config file {fn} does not hold a dict of sections.")
                except yaml.YAMLError:
                    logging.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                logging.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        logging.info("no config file found")
    except ValueError:
        logging.error("error in config file.  It will be ignored", exc_info=True)
    return {}
