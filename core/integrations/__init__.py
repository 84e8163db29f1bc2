"""
EPQS external integrations: Jamovi, FreeCAD and JaamSim.

- framework: data model, errors, registry loader
- catalog: integration/workflow/template/tutorial catalogs
- export: template renderer
- engine: IntegrationEngine facade
"""
