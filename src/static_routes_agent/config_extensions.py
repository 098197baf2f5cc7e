"""oslo.config options shared by the static route command line tools."""

from oslo_config import cfg

DEFAULT_PREFERENCES_FILE = '/etc/staticroutes/preferences.yaml'
DEFAULT_STATE_FILE = '/var/run/staticroutes/state.json'

store_opts = [
    cfg.StrOpt('preferences-file',
               default=DEFAULT_PREFERENCES_FILE,
               help='YAML configuration database holding the network '
                    'services and their static routes.'),
    cfg.StrOpt('state-file',
               default=DEFAULT_STATE_FILE,
               help='JSON observable state store watched by staticrouted. '
                    'Route changes are announced here.'),
    cfg.FloatOpt('lock-timeout',
                 default=5.0,
                 min=0,
                 help='Seconds to wait for the configuration database lock '
                      'before giving up.'),
]


def register_store_opts(conf):
    """Register the store options as command line options on ``conf``."""
    conf.register_cli_opts(store_opts)
