"""界面模块"""
