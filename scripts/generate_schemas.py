"""Generate JSON schemas for the wire models and save them to schemas/."""

import json
from pathlib import Path

from proofchain.contracts import AttestationPayload, AttestationResponse

WIRE_MODELS = {
    "attestation_payload.schema.json": AttestationPayload,
    "attestation_response.schema.json": AttestationResponse,
}


def generate_schemas(schemas_dir: Path = None) -> list:
    """Write one schema file per wire model. Returns the written paths."""
    schemas_dir = schemas_dir or Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    written = []
    for filename, model in WIRE_MODELS.items():
        schema_path = schemas_dir / filename
        with open(schema_path, 'w', encoding='utf-8') as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Generated: {schema_path}")
        written.append(schema_path)

    print("\nSchema generation complete!")
    return written


if __name__ == "__main__":
    generate_schemas()
