"""Pure reconciliation core: ledgers in, entity profiles and trails out."""
