"""
Basic Usage Example: People Directory

This example walks through the csvdb workflow:
1. Define a schema with field type tags
2. Insert records (validated strictly)
3. Query, update and delete by partial match
4. Export the file to a Polars DataFrame
"""

import tempfile

from csvdb import CsvStore, NotFoundError, ValidationError


def main() -> None:
    """Demonstrate every store operation against a temporary file."""
    with tempfile.TemporaryDirectory() as data_dir:
        db = CsvStore(data_dir, "people.csv")
        db.define_schema({"name": "string", "age": "number", "email": "string"})

        db.insert_many(
            [
                {"name": "John Doe", "age": 25, "email": "johndoe@example.com"},
                {"name": "Jane Smith", "age": 30, "email": "janesmith@example.com"},
                {"name": "Lance Langworth", "age": 42, "email": "neal@example.com"},
            ]
        )

        # Numbers come back as text
        print(db.find_one({"name": "John Doe"}))

        try:
            db.insert({"name": 123, "age": "x", "email": "e"})
        except ValidationError as e:
            print(f"Rejected: {e}")

        db.update_one({"name": "John Doe"}, {"age": 50})
        db.delete_one({"name": "Jane Smith"})

        try:
            db.delete_many({"name": "Nobody"})
        except NotFoundError as e:
            print(f"Nothing deleted: {e}")

        print(db.find_all({}))
        print(db.to_polars(typed=True))

        db.delete_all()
        print(db.get_all())


if __name__ == "__main__":
    main()
