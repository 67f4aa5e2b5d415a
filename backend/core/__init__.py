"""
core - 领域无关的框架层

- domain: 实体关系描述（链接类型、基数、级联策略、注册表）
"""
