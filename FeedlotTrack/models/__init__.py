# models/__init__.py
from utils.db import Base  # re-export
from .lote import Lote, PeriodoAlimentacao
from .dieta import Dieta, IngredienteDieta, PreMistura, IngredientePreMistura
from .estoque import Insumo, EntradaEstoque, SaidaEstoque
from .vagao import Vagao
from .leitura_cocho import LeituraCocho
from .planejamento import PlanejamentoTrato, TratoPlanejado
from .batida import Batida
