"""`CsvStore`: document-style CRUD over a flat delimited text file."""

import contextlib
import os
import stat
import tempfile
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, NoReturn

from loguru import logger

from .codec import LINE_TERMINATOR, decode_all, encode, encode_all
from .errors import FormatError, NotFoundError, SchemaError, ValidationError
from .query import filter_records, matches
from .schema import Schema, define_schema

Record = dict[str, Any]


class CsvStore:
    """
    Schema-validated record store backed by one text file.

    Each record is one line of ``", "``-separated values in schema field
    order. Every operation reads the whole file; mutations other than
    inserts rewrite it completely. Records come back as text: a number
    inserted as ``25`` is read as ``"25"``.

    Operations on one instance are serialised by a lock. Separate instances
    or processes sharing a file are not coordinated and can lose updates.

    Parameters
    ----------
    dirname : str or Path
        Directory holding the data file.
    filename : str
        Name of the data file. It is created by the first write.
    schema : Mapping[str, str] or Schema, optional
        Field name -> type tag mapping (or a compiled Schema). May instead be
        given later through `define_schema()`.
    encoding : str, default "utf-8"
        Text encoding of the data file.
    strict : bool, default False
        If True, stored lines whose field count differs from the schema raise
        `FormatError`. Otherwise short lines are padded with None and extra
        fields are dropped.

    Examples
    --------
        >>> from csvdb import CsvStore
        >>> db = CsvStore("/tmp", "people.csv")
        >>> db.define_schema({"name": "string", "age": "number"})
        Schema({'name': 'string', 'age': 'number'})
        >>> db.insert({"name": "Alice", "age": 25})
        >>> db.find_one({"name": "Alice"})
        {'name': 'Alice', 'age': '25'}
    """

    def __init__(
        self,
        dirname: str | os.PathLike,
        filename: str,
        *,
        schema: Mapping[str, str] | Schema | None = None,
        encoding: str = "utf-8",
        strict: bool = False,
    ):
        self.path = Path(dirname) / filename
        self.encoding = encoding
        self.strict = strict
        self._schema: Schema | None = None
        self._lock = threading.RLock()
        if schema is not None:
            self.define_schema(schema)

    def __repr__(self) -> str:
        return f"CsvStore(path={str(self.path)!r}, schema={self._schema!r})"

    @property
    def schema(self) -> Schema | None:
        """The compiled schema, or None if none has been defined."""
        return self._schema

    def define_schema(self, schema: Mapping[str, str] | Schema) -> Schema:
        """
        Compile and install the store's schema, replacing any previous one.

        Existing data is neither re-validated nor migrated.

        Returns
        -------
        Schema
            The compiled schema.

        Raises
        ------
        SchemaError
            If the definition is invalid.
        """
        compiled = schema if isinstance(schema, Schema) else define_schema(schema)
        with self._lock:
            self._schema = compiled
        logger.info(f"Defined schema for '{self.path}': {compiled.tags()}")
        return compiled

    # ----- read operations -----

    def get_all(self) -> list[Record]:
        """Return every stored record, in file order."""
        with self._lock:
            return self._load(self._require_schema())

    def find_one(self, query: Mapping[str, Any]) -> Record | None:
        """Return the first record fully matching `query`, or None."""
        with self._lock:
            schema = self._require_schema()
            for record in self._load(schema):
                if matches(query, record):
                    return record
            return None

    def find_all(self, query: Mapping[str, Any]) -> list[Record] | None:
        """Return every record fully matching `query`, or None if there are none."""
        with self._lock:
            found = filter_records(query, self._load(self._require_schema()))
            return found or None

    # ----- insert operations -----

    def insert(self, record: Mapping[str, Any]) -> None:
        """
        Validate one record and append it to the file.

        Raises
        ------
        SchemaError
            If no schema is defined.
        ValidationError
            If any field fails its validator. The file is left unchanged.
        """
        with self._lock:
            schema = self._require_schema()
            self._validate(schema, record)
            self._append(encode(record, schema.field_names) + LINE_TERMINATOR)
            logger.debug(f"Inserted 1 record into '{self.path}'")

    def insert_many(self, records: Iterable[Mapping[str, Any]]) -> None:
        """
        Validate every record, then append them all in one write.

        The batch is all-or-nothing: if any record fails validation, nothing
        is written.

        Raises
        ------
        SchemaError
            If no schema is defined.
        ValidationError
            For the first record that fails; its position is prefixed to
            each error location.
        """
        with self._lock:
            schema = self._require_schema()
            records = list(records)
            for index, record in enumerate(records):
                try:
                    self._validate(schema, record)
                except ValidationError as exc:
                    raise ValidationError(
                        [{**err, "loc": (index, *err["loc"])} for err in exc.errors]
                    ) from exc
            if records:
                self._append(encode_all(records, schema.field_names))
            logger.debug(f"Inserted {len(records)} records into '{self.path}'")

    # ----- update operations -----

    def update_one(self, query: Mapping[str, Any], update: Mapping[str, Any]) -> None:
        """
        Apply `update` to the first record matching `query` and rewrite the file.

        Raises
        ------
        NotFoundError
            If no record matches.
        """
        with self._lock:
            schema = self._require_schema()
            records = self._load(schema)
            for record in records:
                if matches(query, record):
                    record.update(update)
                    break
            else:
                self._not_found("update_one", query)
            self._rewrite(records, schema)
            logger.info(f"Updated 1 record in '{self.path}'")

    def update_many(self, query: Mapping[str, Any], update: Mapping[str, Any]) -> None:
        """
        Apply `update` to every record matching `query` and rewrite the file.

        Raises
        ------
        NotFoundError
            If no record matches.
        """
        with self._lock:
            schema = self._require_schema()
            records = self._load(schema)
            found = filter_records(query, records)
            if not found:
                self._not_found("update_many", query)
            for record in found:
                record.update(update)
            self._rewrite(records, schema)
            logger.info(f"Updated {len(found)} records in '{self.path}'")

    # ----- delete operations -----

    def delete_one(self, query: Mapping[str, Any]) -> bool:
        """
        Remove the first record matching `query` and rewrite the file.

        Returns
        -------
        bool
            Always True.

        Raises
        ------
        NotFoundError
            If no record matches.
        """
        with self._lock:
            schema = self._require_schema()
            records = self._load(schema)
            index = next(
                (i for i, record in enumerate(records) if matches(query, record)),
                None,
            )
            if index is None:
                self._not_found("delete_one", query)
            del records[index]
            self._rewrite(records, schema)
            logger.info(f"Deleted 1 record from '{self.path}'")
            return True

    def delete_many(self, query: Mapping[str, Any]) -> None:
        """
        Remove every record matching `query` and rewrite the file.

        An empty query removes everything.

        Raises
        ------
        NotFoundError
            If no record matches.
        """
        with self._lock:
            schema = self._require_schema()
            records = self._load(schema)
            kept = [record for record in records if not matches(query, record)]
            removed = len(records) - len(kept)
            if not removed:
                self._not_found("delete_many", query)
            self._rewrite(kept, schema)
            logger.info(f"Deleted {removed} records from '{self.path}'")

    def delete_all(self) -> bool:
        """Empty the file. Needs no schema and never fails on a missing file."""
        with self._lock:
            self._write("")
            logger.info(f"Deleted all records from '{self.path}'")
            return True

    # ----- exports -----

    def to_polars(self, typed: bool = False):
        """
        Return every record as a Polars DataFrame, one column per field.

        Parameters
        ----------
        typed : bool, default False
            If True, cast number, bigint, boolean and date columns from text
            to their Polars dtypes. Unparsable values become null.
        """
        from .generators.polars import records_to_polars

        with self._lock:
            schema = self._require_schema()
            return records_to_polars(self._load(schema), schema, typed=typed)

    # ----- internals -----

    def _require_schema(self) -> Schema:
        if self._schema is None:
            logger.warning(f"Data operation on '{self.path}' without a schema")
            raise SchemaError("Schema not defined; call define_schema() first")
        return self._schema

    def _validate(self, schema: Schema, record: Any) -> None:
        try:
            schema.validate(record)
        except ValidationError as exc:
            logger.warning(f"Rejected record for '{self.path}': {exc}")
            raise

    def _not_found(self, operation: str, query: Mapping[str, Any]) -> NoReturn:
        logger.warning(f"{operation} on '{self.path}' matched no records: {dict(query)}")
        raise NotFoundError(f"No data found for query {dict(query)!r}")

    def _read(self) -> str:
        try:
            with open(self.path, encoding=self.encoding, newline="") as fh:
                return fh.read()
        except FileNotFoundError:
            return ""

    def _load(self, schema: Schema) -> list[Record]:
        try:
            records = decode_all(self._read(), schema.field_names, strict=self.strict)
        except FormatError as exc:
            logger.warning(f"Malformed data in '{self.path}': {exc}")
            raise
        logger.debug(f"Loaded {len(records)} records from '{self.path}'")
        return records

    def _rewrite(self, records: list[Record], schema: Schema) -> None:
        self._write(encode_all(records, schema.field_names))

    def _write(self, contents: str) -> None:
        """Replace the file's contents via a temporary file in the same directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as fh:
                fh.write(contents)
            # mkstemp creates 0600 files; keep the data file's own permissions.
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Wrote {len(contents)} characters to '{self.path}'")

    def _append(self, contents: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Files written without a final terminator must not have the new
        # record glued onto their last line.
        if self._missing_terminator():
            contents = LINE_TERMINATOR + contents
        with open(self.path, "a", encoding=self.encoding, newline="") as fh:
            fh.write(contents)

    def _missing_terminator(self) -> bool:
        try:
            with open(self.path, "rb") as fh:
                fh.seek(0, os.SEEK_END)
                if fh.tell() == 0:
                    return False
                terminator = self._encoded_terminator()
                if fh.tell() < len(terminator):
                    return True
                fh.seek(-len(terminator), os.SEEK_END)
                return fh.read(len(terminator)) != terminator
        except FileNotFoundError:
            return False

    def _encoded_terminator(self) -> bytes:
        # Encoders such as UTF-16 prefix a BOM; the terminator is only what a
        # second line adds.
        one = LINE_TERMINATOR.encode(self.encoding)
        two = (LINE_TERMINATOR * 2).encode(self.encoding)
        return two[len(one):]

    def _file_mode(self) -> int:
        """Permission bits for a rewrite: the current file's, else the umask default."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
