"""
Calculs agronomiques purs, sans accès à la base
Rotation, occupation des planches, sol, irrigation et calendrier
"""
