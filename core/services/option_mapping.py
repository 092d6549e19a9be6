from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

import structlog

from core.schemas.field_schema import FieldDescriptor, LeadLabel

log = structlog.get_logger(__name__)

OptionMapping = Dict[str, Dict[str, str]]
LEAD_LABELS_KEY = "label_ids"


class OptionLabelMapper:
    """Catálogo de campos → {field_key: {código: label}}."""

    @staticmethod
    def build(
        standard_fields: Iterable[FieldDescriptor | Mapping[str, Any]],
        custom_fields: Iterable[FieldDescriptor | Mapping[str, Any]] = (),
        lead_labels: Iterable[LeadLabel | Mapping[str, Any]] = (),
    ) -> OptionMapping:
        """
        Padrão primeiro, custom depois. Chave repetida: o último vence, logo
        um campo custom sobrescreve o padrão de mesma chave.

        Etiquetas de lead (id → name) entram por último, sob `label_ids`.
        """
        mapping: OptionMapping = {}
        for descriptor in [*(standard_fields or ()), *(custom_fields or ())]:
            field = _as_model(FieldDescriptor, descriptor)
            if field is None or not field.has_options:
                continue

            labels: Dict[str, str] = {}
            for option in field.options:
                if option.code is None or option.label is None:
                    continue
                labels[option.code] = option.label

            if not labels:
                continue
            if field.key in mapping:
                log.debug("Option mapping overridden", field_key=field.key)
            mapping[field.key] = labels

        lead_names: Dict[str, str] = {}
        for raw in lead_labels or ():
            label = _as_model(LeadLabel, raw)
            if label is not None and label.name:
                lead_names[label.id] = label.name
        if lead_names:
            mapping[LEAD_LABELS_KEY] = lead_names

        log.debug("Option mapping built", fields=len(mapping))
        return mapping


def _as_model(model, raw):
    if isinstance(raw, model):
        return raw
    try:
        return model.model_validate(raw)
    except ValueError as exc:
        log.warning("Skipping invalid catalog entry", model=model.__name__, error=str(exc))
        return None
