import logging

from exceptions import ConfigurationError
from evaluator import VARIABLES


class Config:
    DEBUG = False
    TESTING = False
    # at most one column per alphabet symbol
    MAX_VARIABLES = len(VARIABLES)
    LOG_LEVEL = 'INFO'
    LOG_FILE = None
    SORT_JSON_KEYS = False


def load_config(app, test_config=None):
    """Defaults, then LOGIC_* environment variables, then `test_config`."""
    app.config.from_object(Config)
    app.config.from_prefixed_env('LOGIC')
    if test_config is not None:
        app.config.from_mapping(test_config)
    validate_config(app.config)
    return app.config


def validate_config(config):
    try:
        max_vars = int(config['MAX_VARIABLES'])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            'MAX_VARIABLES must be an integer',
            context={'MAX_VARIABLES': config.get('MAX_VARIABLES')},
            original_exception=e,
        ) from e
    if not 1 <= max_vars <= len(VARIABLES):
        raise ConfigurationError(
            f'MAX_VARIABLES must be between 1 and {len(VARIABLES)}',
            context={'MAX_VARIABLES': max_vars},
        )
    config['MAX_VARIABLES'] = max_vars

    level = config['LOG_LEVEL']
    if not isinstance(level, int) and not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ConfigurationError('Unknown LOG_LEVEL', context={'LOG_LEVEL': level})
