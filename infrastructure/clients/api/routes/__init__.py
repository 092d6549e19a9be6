# importar os módulos registra as rotas no route_registry
from . import entities, fields, filters
