from enum import Enum

# =====================================================
# 🐂 LOTES
# =====================================================
class LoteStatusEnum(str, Enum):
    ATIVO = "ATIVO"
    FINALIZADO = "FINALIZADO"


# =====================================================
# 🥣 LEITURA DE COCHO
# =====================================================
class FaseDietaEnum(str, Enum):
    adaptacao_crescimento = "adaptacao_crescimento"  # Adaptação e crescimento
    terminacao = "terminacao"                        # Terminação


class LeituraNoturnaEnum(str, Enum):
    vazio = "vazio"
    normal = "normal"
    cheio = "cheio"


class ComportamentoManhaEnum(str, Enum):
    # Da maior para a menor demonstração de fome
    maioria_em_pe_muita_fome = "maioria_em_pe_muita_fome"
    alguns_em_pe_fome = "alguns_em_pe_fome"
    alguns_em_pe = "alguns_em_pe"
    deitados_calmos = "deitados_calmos"


class SituacaoCochoEnum(str, Enum):
    # Do cocho mais limpo para o com mais sobra
    limpo_lambido = "limpo_lambido"
    limpo_sem_lambida = "limpo_sem_lambida"
    pouca_sobra = "pouca_sobra"
    com_sobras = "com_sobras"
    muitas_sobras = "muitas_sobras"


class TipoLeituraEnum(str, Enum):
    inteligente = "inteligente"  # Ajuste automático pela nota de cocho
    simples = "simples"          # Sem ajuste automático


# =====================================================
# 🌾 DIETAS / INSUMOS
# =====================================================
class TipoIngredienteEnum(str, Enum):
    insumo = "insumo"
    pre_mistura = "pre_mistura"


# =====================================================
# 🚜 BATIDAS
# =====================================================
class BatidaStatusEnum(str, Enum):
    PREPARANDO = "PREPARANDO"
    CONCLUIDA = "CONCLUIDA"
    CANCELADA = "CANCELADA"
