from cityscope.core.settings import Settings


def _settings(**env) -> Settings:
    return Settings(_env_file=None, SECRET_KEY="s3cret", **env)


def test_database_url_is_used_as_given() -> None:
    settings = _settings(DATABASE_URL="postgresql+psycopg://app@db/cityscope")
    assert settings.effective_database_url == "postgresql+psycopg://app@db/cityscope"


def test_testing_database_overrides_main_url() -> None:
    settings = _settings(
        DATABASE_URL="sqlite:///./cityscope.db",
        TEST_DATABASE_URL="sqlite:///./test.db",
        USE_TEST_DATABASE=True,
    )
    assert settings.effective_database_url == "sqlite:///./test.db"


def test_testing_database_needs_a_url() -> None:
    settings = _settings(DATABASE_URL="sqlite:///./cityscope.db", USE_TEST_DATABASE=True)
    assert settings.effective_database_url == "sqlite:///./cityscope.db"
