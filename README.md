# toolhive

Library pieces for running MCP servers in containers.

## Modules

- `toolhive.permissions` – permission profiles (`Profile`, `NetworkPermissions`,
  `OutboundNetworkPermissions`) that convert to and from JSON-style dicts, the
  built-in profiles `builtin_none_profile()` and `builtin_network_profile()`,
  `from_file(path)` for JSON profile files, and `MountDeclaration` for mounts
  written as `/path`, `host-path:container-path` or
  `scheme://resource:container-path`. Parsing cleans paths lexically and rejects
  command-injection characters (`$ & ; |` and backticks) and null bytes with
  `MountDeclarationError`; unreadable or malformed profiles raise `ProfileError`.
- `toolhive.networking` – `is_available(port)` checks that both TCP and UDP can
  bind; `find_available()` tries ten random ports from 10000 to 65535, then scans
  sequentially, returning 0 if nothing is free; `find_or_use_port(port)` returns a
  free port for 0, or the given port if free, and raises `OSError` otherwise;
  `is_ipv6_available()` looks for a non-loopback IPv6 address on an interface that
  is up.
- `toolhive.process` – PID files named `toolhive-<name>.pid` in the system
  temporary directory (`write_pid_file`, `write_current_pid_file`,
  `read_pid_file`, `remove_pid_file`), `find_process(pid)`, `kill_process(pid)`
  (sends SIGTERM) and `is_detached()`, which checks `TOOLHIVE_DETACHED=1`.
- `toolhive.registry` – dataclasses for a registry document (`Registry`,
  `Server`, `EnvVar`, `Metadata`) with `from_dict` / `to_dict`, and
  `Metadata.parsed_time()` for RFC 3339 timestamps.
- `toolhive.state` – the `Store` interface and `LocalStore`, which keeps one
  `<name>.json` file per entry under `<state dir>/<app>/runconfigs`. Missing
  entries raise `StateNotFoundError`. `new_store(app_name)` returns a
  `LocalStore`; pass `state_home=` to `LocalStore` to use another root directory.
- `toolhive.secrets.aes` – `encrypt` / `decrypt` with AES-GCM (16, 24 or 32 byte
  keys); output is `nonce | ciphertext | tag`, plaintext is limited to 32 MiB
  (`ExceedsMaxSizeError`).
- `toolhive.secrets.provider` – the `Provider` interface, `SecretsError`, and
  `parse_secret_parameter("<name>,target=<ENV_VAR>")`.
- `toolhive.secrets.encrypted` – `EncryptedManager`, a thread-safe provider whose
  secrets are mirrored to an AES-GCM encrypted JSON file; open one with
  `new_encrypted_manager(file_path, key)`.
- `toolhive.secrets.onepassword` – `OnePasswordManager`, a read-only provider
  that resolves `op://` references through an `OPSecretsService` you supply.
- `toolhive.logger` / `toolhive.logr` – leveled logging: JSON lines on stdout,
  or, unless `UNSTRUCTURED_LOGS` is set to a false value, console lines on
  stderr. `LogSink` adapts the logger to a logr-style interface.

## Installation

```
pip install .
```

## Examples

Parse mount declarations:

```python
from toolhive.permissions import MountDeclaration, builtin_network_profile

source, target = MountDeclaration("/host/data:/data").parse()
profile = builtin_network_profile()
profile.read.append(MountDeclaration("volume://cache:/cache"))
print(profile.to_dict())
```

Pick a port:

```python
from toolhive.networking import find_or_use_port

port = find_or_use_port(0)  # any free port from 10000 upwards
```

Keep secrets in an encrypted file:

```python
import os
from toolhive.secrets.encrypted import new_encrypted_manager

key = os.urandom(32)
manager = new_encrypted_manager("secrets.enc", key)
manager.set_secret("api", "secret")
print(manager.get_secret("api"))
```

Parse a secret parameter:

```python
from toolhive.secrets.provider import parse_secret_parameter

param = parse_secret_parameter("github,target=GITHUB_TOKEN")
print(param.name, param.target)
```

Resolve 1Password references through your own service:

```python
from toolhive.secrets.onepassword import OnePasswordManager, OPSecretsService

class StaticService(OPSecretsService):
    def resolve(self, secret_reference, timeout):
        return "secret"

manager = OnePasswordManager(StaticService())
print(manager.get_secret("op://vault/item/field"))
```

Store run state:

```python
import io
from toolhive.state import new_store

store = new_store("toolhive")
store.save("my-server", io.BytesIO(b'{"name": "my-server"}'))
print(store.list())
```

Logging:

```python
from toolhive import logger

logger.set_debug(True)
logger.initialize()
logger.infof("listening on %d", 8080)
logger.get_logger("runner").info("started", "name", "fetch")
```

## What the package does not do

- It has no command-line program and does not run or stop containers; it only
  provides the pieces such a tool is built from.
- `toolhive.registry` defines the registry data types but ships no registry
  catalogue and has no lookup or search functions.
- `toolhive.secrets.onepassword` contains no 1Password client: resolving
  references is left to the `OPSecretsService` you pass in, and setting,
  deleting or listing secrets through it does nothing.

## Tests

```
pip install .[test]
pytest
```