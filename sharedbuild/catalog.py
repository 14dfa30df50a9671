"""Dependency-ordered catalog of Go standard library packages.

The order is a topological sort authored by hand; nothing here checks it.
A wrong position is a data bug in this file, not something the build can detect.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Tuple

import yaml


class CatalogError(RuntimeError):
    """Raised when the package catalog cannot be parsed."""


@dataclass(frozen=True)
class CatalogTier:
    name: str
    packages: Tuple[str, ...]


@dataclass(frozen=True)
class ExcludedPackage:
    """A package deliberately left out because it cannot be built in shared mode."""

    package: str
    reason: str


DEFAULT_TIERS: Tuple[CatalogTier, ...] = (
    CatalogTier("L0 packages", (
        "unsafe",
        "runtime/internal/sys",
        "runtime/internal/atomic",
        "runtime",
        "sync/atomic",
        "internal/race",
        "sync",
        "errors",
        "io",
    )),
    CatalogTier("L1 packages", (
        "unicode/utf8",
        "unicode/utf16",
        "sort",
        "math",
        "math/cmplx",
        "math/rand",
        "strconv",
    )),
    CatalogTier("L2 packages", (
        "unicode",
        "strings",
        "bytes",
        "path",
        "bufio",
    )),
    CatalogTier("L3 packages", (
        "crypto/subtle",
        "reflect",
        "encoding/base32",
        "encoding/base64",
        "encoding/binary",
        "hash",
        "hash/adler32",
        "hash/crc32",
        "hash/crc64",
        "hash/fnv",
        "crypto",
        "crypto/cipher",
        "image/color",
        "image",
        "image/color/palette",
    )),
    CatalogTier("Operating system access", (
        "internal/syscall/windows/sysdll",
        "syscall",
        "internal/syscall/unix",
        "time",
        "os",
        "path/filepath",
        "io/ioutil",
        "os/signal",
        "fmt",
        "log",
        "context",
        "os/exec",
    )),
    CatalogTier("Low level testing dependencies", (
        "regexp/syntax",
        "regexp",
        "text/tabwriter",
        "runtime/debug",
        "runtime/pprof",
        "runtime/trace",
        "flag",
        "testing",
        "testing/iotest",
        "testing/quick",
        "internal/testenv",
    )),
    CatalogTier("Go parser", (
        "go/token",
        "go/scanner",
        "go/ast",
        "go/parser",
        "go/printer",
        "text/template/parse",
        "net/url",
        "text/template",
        "go/doc",
        "go/format",
    )),
    CatalogTier("Go type checking", (
        "math/big",
        "go/constant",
        "go/build",
        "container/heap",
        "go/types",
        "text/scanner",
        "compress/flate",
        "compress/zlib",
        "debug/dwarf",
        "debug/elf",
        "go/internal/gcimporter",
        "go/internal/gccgoimporter",
        "go/importer",
    )),
    CatalogTier("One of a kind", (
        "archive/tar",
        "archive/zip",
        "compress/bzip2",
        "compress/gzip",
        "compress/lzw",
        "container/list",
        "database/sql/driver",
        "database/sql",
        "debug/gosym",
        "debug/macho",
        "debug/pe",
        "debug/plan9obj",
        "encoding",
        "encoding/ascii85",
        "encoding/asn1",
        "encoding/csv",
        "encoding/gob",
        "encoding/hex",
        "encoding/json",
        "encoding/pem",
        "encoding/xml",
        "html",
        "image/internal/imageutil",
        "image/draw",
        "image/gif",
        "image/jpeg",
        "image/png",
        "index/suffixarray",
        "internal/singleflight",
        "internal/trace",
        "mime",
        "mime/quotedprintable",
        "net/internal/socktest",
        "html/template",
    )),
    CatalogTier("CGO related", (
        "runtime/cgo",
        "runtime/race",
        "os/user",
    )),
    CatalogTier("Basic networking", (
        "internal/nettrace",
        "net",
    )),
    CatalogTier("Uses of networking", (
        "net/textproto",
        "net/mail",
        "log/syslog",  # Panic in linker...
    )),
    CatalogTier("Core crypto", (
        "crypto/aes",
        "crypto/des",
        "crypto/hmac",
        "crypto/md5",
        "crypto/rc4",
        "crypto/sha1",
        "crypto/sha256",
        "crypto/sha512",
    )),
    CatalogTier("Crypto random", (
        "crypto/rand",
    )),
    CatalogTier("Mathematical crypto", (
        "crypto/rsa",
        "crypto/elliptic",
        "crypto/ecdsa",  # Panic in linker...
        "crypto/dsa",
    )),
    CatalogTier("SSL/TLS", (
        "crypto/x509/pkix",
    )),
    CatalogTier("net + crypto", (
        "mime/multipart",
    )),
    CatalogTier("HTTP", (
        "net/http/httptrace",
        "net/http/internal",
    )),
)


DEFAULT_EXCLUDED: Tuple[ExcludedPackage, ...] = (
    ExcludedPackage("internal/syscall/windows", "windows only"),
    ExcludedPackage("internal/syscall/windows/registry", "windows only"),
    ExcludedPackage("runtime/msan", "requires the memory sanitizer toolchain"),
    ExcludedPackage("crypto/x509", "fails to build in shared mode"),
    ExcludedPackage("crypto/tls", "depends on crypto/x509"),
    ExcludedPackage("net/smtp", "depends on crypto/tls"),
    ExcludedPackage("net/http", "depends on crypto/tls"),
    ExcludedPackage("expvar", "depends on net/http"),
    ExcludedPackage("net/http/cgi", "depends on net/http"),
    ExcludedPackage("net/http/cookiejar", "depends on net/http"),
    ExcludedPackage("net/http/fcgi", "depends on net/http"),
    ExcludedPackage("net/http/httptest", "depends on net/http"),
    ExcludedPackage("net/http/httputil", "depends on net/http"),
    ExcludedPackage("net/http/pprof", "depends on net/http"),
    ExcludedPackage("net/rpc", "depends on net/http"),
    ExcludedPackage("net/rpc/jsonrpc", "depends on net/http"),
)


@dataclass(frozen=True)
class PackageCatalog:
    """Read-only ordered sequence of package paths, grouped into dependency tiers."""

    tiers: Tuple[CatalogTier, ...] = DEFAULT_TIERS
    excluded: Tuple[ExcludedPackage, ...] = DEFAULT_EXCLUDED
    _order: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        order = tuple(package for tier in self.tiers for package in tier.packages)
        excluded = {entry.package for entry in self.excluded}
        readded = [package for package in order if package in excluded]
        if readded:
            raise CatalogError(f"Excluded packages listed for building: {', '.join(readded)}")
        object.__setattr__(self, "_order", order)

    @classmethod
    def default(cls) -> "PackageCatalog":
        return cls()

    @classmethod
    def from_file(cls, path: str | Path) -> "PackageCatalog":
        try:
            raw_text = Path(path).read_text()
        except (OSError, UnicodeDecodeError) as exc:
            raise CatalogError(f"Cannot read catalog file {path}: {exc}") from exc
        try:
            raw_data = json.loads(raw_text)
        except json.JSONDecodeError:
            try:
                raw_data = yaml.safe_load(raw_text)
            except yaml.YAMLError as exc:
                raise CatalogError(f"Cannot parse catalog file {path}") from exc
        return cls.from_dict(raw_data)

    @classmethod
    def from_dict(cls, data: Any) -> "PackageCatalog":
        if not isinstance(data, dict) or not isinstance(data.get("tiers"), list):
            raise CatalogError("Catalog must contain a top-level 'tiers' list")
        for entry in data["tiers"]:
            if not isinstance(entry, dict) or not isinstance(entry.get("packages"), list):
                raise CatalogError("Each catalog tier must contain a 'packages' list")
        try:
            tiers = tuple(
                CatalogTier(
                    name=str(entry.get("name", f"tier {index}")),
                    packages=tuple(str(package) for package in entry["packages"]),
                )
                for index, entry in enumerate(data["tiers"])
            )
            excluded = tuple(
                ExcludedPackage(package=str(entry["package"]), reason=str(entry.get("reason", "")))
                for entry in data.get("excluded") or []
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise CatalogError(f"Malformed catalog entry: {exc}") from exc
        return cls(tiers=tiers, excluded=excluded)

    @property
    def packages(self) -> Tuple[str, ...]:
        return self._order

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, package: object) -> bool:
        return package in self._order
