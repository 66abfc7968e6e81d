from __future__ import annotations

import enum
import json
import keyring


class ConfigKey(enum.StrEnum):
    ALIAS = "ALIAS"
    TOKEN = "TOKEN"
    SECRET = "SECRET"


SECRET_KEYS = {ConfigKey.TOKEN, ConfigKey.SECRET}


class KeyringConfig(dict[ConfigKey, str]):
    KR_SERVICE_NAME: str = "maxcdn"
    KR_USERNAME: str = "config"

    def __enter__(self) -> KeyringConfig:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.save()

    @classmethod
    def load_from_keyring(cls) -> KeyringConfig:
        """Load the configuration from the keyring."""
        json_str = keyring.get_password(cls.KR_SERVICE_NAME, cls.KR_USERNAME)
        if json_str is None:
            return cls()
        known = {key.value for key in ConfigKey}
        # keys written by other versions are ignored
        return cls({ConfigKey(k): v for k, v in json.loads(json_str).items() if k in known})

    def save(self):
        """Save the configuration to the keyring."""
        json_str = json.dumps(self)
        keyring.set_password(self.KR_SERVICE_NAME, self.KR_USERNAME, json_str)

    def to_keys_json(self) -> str:
        """Dump the configuration as json, with secrets masked."""
        result = {}
        for key in ConfigKey:
            if key in self:
                if not self[key]:
                    # empty key
                    result[key] = ""
                elif key in SECRET_KEYS:
                    result[key] = "********"
                else:
                    result[key] = self[key]
            else:
                # missing key
                result[key] = "(not set)"

        return json.dumps(result, indent=2)
