# trustbundle

A library of building blocks for managing a trust bundle of CA
certificates: loading and checking default CA packages, reading certificate
data out of config maps and secrets, keeping a bundle's status up to date,
building apply patches for that status, and writing the certificates out as
JKS or PKCS#12 trust stores.

## Modules

### `trustbundle.package`

A `Package` has a `name`, a `version` and a PEM `bundle`.

- `load_package(reader)` reads a JSON package from a text or binary stream
  and validates it.
- `load_package_from_file(path)` does the same for a file. The file name must
  end in `.json`.
- `Package.validate()` checks that the bundle parses as PEM certificates and
  that the name and version are not empty.
- `Package.string_id()` returns `name-version-<hash>`, where `<hash>` is the
  first 8 bytes of the SHA-256 of the bundle, written in hex. The ID changes
  whenever the bundle content changes.
- `Package.clone()` returns a copy of the package.

Every failure raises `PackageError`.

### `trustbundle.source`

`SourceReader(namespace, config_maps, secrets)` works on in-memory
`ConfigMap` and `Secret` objects. It only considers objects in its own
namespace.

A `SourceObjectKeySelector` picks objects in one of two ways:

- by `name`;
- by `selector`, a `LabelSelector` built from `match_labels` and
  `match_expressions`. Each expression is a `(key, operator, values)` tuple,
  where the operator is `In`, `NotIn`, `Exists` or `DoesNotExist`.

It then takes either a single `key` or, with `include_all_keys`, every key.
Each value that is read is followed by a newline.

- `SourceReader.config_map_bundle(ref)` and
  `SourceReader.secret_bundle(ref)` return the joined data.
- `NotFoundError` is raised for a missing object or key.
- `SelectsNothingError` is raised when a selector matches nothing.
- `InvalidSecretSourceError` is raised when `include_all_keys` is asked of a
  `kubernetes.io/tls` secret, because that would include its private key.
- All three derive from `SourceError`.

These methods return the raw text. They do not check that it is valid PEM.

### `trustbundle.truststore`

- `JKSEncoder(password).encode(certificates)` writes a JKS trust store. Each
  certificate becomes a trusted-certificate entry. The entries are ordered by
  alias, and each entry's creation time is the certificate's not-before time,
  so the output is deterministic.
- `PKCS12Encoder(password).encode(certificates)` writes a PKCS#12 store. With
  a password, it uses PBES1 SHA-1 / 3DES-CBC and 2048 KDF rounds. With an
  empty password, the store is unencrypted.
- `cert_alias(der_data, friendly_name)` builds each entry's alias: the first
  eight hex digits of the certificate's SHA-256, then `|`, then the friendly
  name. The encoders use the RFC 4514 subject as the friendly name. In the
  JKS store the alias is lower-cased.

### `trustbundle.conditions`

This module provides the `BundleCondition`, `BundleStatus` and
`ConditionStatus` types and three functions:

- `bundle_has_condition(existing, search)` reports whether a condition of the
  same type matches in status, reason, message and observed generation. It
  ignores the transition time.
- `set_bundle_condition(existing, patch_conditions, new, clock)` puts the
  condition into `patch_conditions`, replacing any condition of the same
  type. The transition time is `clock()`, or the current UTC time when no
  clock is given. If an existing condition of that type already has the same
  status, its transition time is kept instead.
- `set_bundle_status_default_ca_version(status, required_id)` sets or clears
  `default_ca_package_version` and returns whether it changed.

### `trustbundle.patch`

- `generate_bundle_status_patch(name, status)` returns an `ApplyPatch`. It
  holds compact JSON with the `Bundle` kind, the API version, the name and
  the status. `ApplyPatch.data()` gives the bytes, and
  `ApplyPatch.patch_type()` gives `application/apply-patch+yaml`.
- `managed_field_entries(fields, data_fields)` returns a single `Apply` entry
  for the `trust-manager` field manager. It owns the given `data` and
  `binaryData` keys.

## Installing

```
pip install trustbundle
```

To include the test requirements:

```
pip install "trustbundle[test]"
```

## Examples

Load a package from a file:

```python
from trustbundle.package import load_package_from_file, PackageError

try:
    pkg = load_package_from_file("cas.json")
except PackageError as exc:
    print(f"rejected: {exc}")
else:
    print(pkg.string_id())
```

Encode certificates as a PKCS#12 store:

```python
from cryptography import x509
from trustbundle.truststore import PKCS12Encoder

with open("cas.pem", "rb") as handle:
    certificates = x509.load_pem_x509_certificates(handle.read())

password = "password"
store_bytes = PKCS12Encoder(password).encode(certificates)
```

## What it does not do

This package has no command-line tool. It does not connect to a cluster,
watch resources or run as a controller. It also does not combine several
sources into one finished bundle. Reading sources, validating packages,
updating status and encoding stores are separate pieces, and the caller
wires them together.