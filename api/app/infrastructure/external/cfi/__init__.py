"""
Contrato y adaptador HTTP del servicio CFI (scoring de fairness).
"""
