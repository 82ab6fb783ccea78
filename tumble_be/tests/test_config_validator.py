import pytest

from tumble_be.config_validator import ConfigValidator, ConfigValidationError, validate_production_config

ENGINE_ENV_VARS = (
    'FLASK_ENV', 'FLASK_DEBUG', 'CORS_ORIGINS', 'RATELIMIT_STORAGE_URI', 'SPIN_RATE_LIMIT',
    'MAX_TUMBLE_STEPS', 'ENGINE_RNG_SEED', 'FORCE_HTTPS', 'TESTING',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENGINE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # Silence the memory:// development warning
    monkeypatch.setenv('TESTING', 'True')


@pytest.fixture
def production_env(monkeypatch):
    monkeypatch.setenv('CORS_ORIGINS', 'https://slots.example.com, https://www.slots.example.com')
    monkeypatch.setenv('RATELIMIT_STORAGE_URI', 'redis://localhost:6379/0')


def test_development_defaults():
    config = ConfigValidator(is_production=False).validate_all()
    assert config['DEBUG'] is False
    assert config['FORCE_HTTPS'] is False
    assert config['RATELIMIT_STORAGE_URI'] == 'memory://'
    assert config['SPIN_RATE_LIMIT'] == ConfigValidator.DEFAULT_SPIN_RATE_LIMIT
    assert config['CORS_ORIGINS'] == []
    assert config['MAX_TUMBLE_STEPS'] == ConfigValidator.DEFAULT_MAX_TUMBLE_STEPS
    assert config['ENGINE_RNG_SEED'] is None


def test_production_detection_requires_explicit_env(monkeypatch):
    assert ConfigValidator().is_production is False
    monkeypatch.setenv('FLASK_ENV', 'production')
    assert ConfigValidator().is_production is True


def test_production_valid_config(production_env):
    config = ConfigValidator(is_production=True).validate_all()
    assert config['CORS_ORIGINS'] == ['https://slots.example.com', 'https://www.slots.example.com']
    assert config['FORCE_HTTPS'] is True
    assert config['DEBUG'] is False


def test_production_requires_cors(monkeypatch):
    monkeypatch.setenv('RATELIMIT_STORAGE_URI', 'redis://localhost:6379/0')
    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator(is_production=True).validate_all()
    assert 'CORS_ORIGINS' in str(exc_info.value)


def test_production_rejects_memory_rate_limit_storage(monkeypatch):
    monkeypatch.setenv('CORS_ORIGINS', 'https://slots.example.com')
    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator(is_production=True).validate_all()
    assert 'RATELIMIT_STORAGE_URI' in str(exc_info.value)


def test_production_rejects_debug(production_env, monkeypatch):
    monkeypatch.setenv('FLASK_DEBUG', 'true')
    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator(is_production=True).validate_all()
    assert 'DEBUG' in str(exc_info.value)


def test_production_rejects_rng_seed(production_env, monkeypatch):
    monkeypatch.setenv('ENGINE_RNG_SEED', '42')
    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator(is_production=True).validate_all()
    assert 'ENGINE_RNG_SEED' in str(exc_info.value)


def test_development_rng_seed_warns(monkeypatch):
    monkeypatch.setenv('ENGINE_RNG_SEED', '42')
    with pytest.warns(UserWarning, match='ENGINE_RNG_SEED'):
        config = ConfigValidator(is_production=False).validate_all()
    assert config['ENGINE_RNG_SEED'] == 42


def test_invalid_rng_seed(monkeypatch):
    monkeypatch.setenv('ENGINE_RNG_SEED', 'lucky')
    with pytest.raises(ConfigValidationError):
        ConfigValidator(is_production=False).validate_all()


def test_max_tumble_steps_parsing(monkeypatch):
    monkeypatch.setenv('MAX_TUMBLE_STEPS', '250')
    assert ConfigValidator(is_production=False).validate_all()['MAX_TUMBLE_STEPS'] == 250

    monkeypatch.setenv('MAX_TUMBLE_STEPS', '0')
    with pytest.warns(UserWarning, match='unbounded'):
        assert ConfigValidator(is_production=False).validate_all()['MAX_TUMBLE_STEPS'] == 0

    for bad in ('-1', 'many'):
        monkeypatch.setenv('MAX_TUMBLE_STEPS', bad)
        with pytest.raises(ConfigValidationError):
            ConfigValidator(is_production=False).validate_all()


def test_spin_rate_limit(monkeypatch):
    monkeypatch.setenv('SPIN_RATE_LIMIT', '10/second')
    assert ConfigValidator(is_production=False).validate_all()['SPIN_RATE_LIMIT'] == '10/second'

    monkeypatch.setenv('SPIN_RATE_LIMIT', 'lots')
    with pytest.raises(ConfigValidationError):
        ConfigValidator(is_production=False).validate_all()


def test_cors_origin_without_protocol_warns(monkeypatch):
    monkeypatch.setenv('CORS_ORIGINS', 'slots.example.com')
    with pytest.warns(UserWarning, match='protocol'):
        config = ConfigValidator(is_production=False).validate_all()
    assert config['CORS_ORIGINS'] == ['slots.example.com']


def test_validate_production_config_exits_on_failure(monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'production')
    with pytest.raises(SystemExit) as exc_info:
        validate_production_config()
    assert exc_info.value.code == 1
